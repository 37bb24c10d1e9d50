from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from dailydare.core.exceptions.base import UnauthorizedError
from dailydare.core.logger.logger import get_logger
from dailydare.core.service.auth.models.token import TokenPayload, TokenResponse, TokenType
from dailydare.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()


class JWTService:
    """Issues and verifies access tokens. Identity itself comes from the auth provider."""

    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> TokenResponse:
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.access_token_expire_minutes)

        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + expires_delta

        to_encode = TokenPayload(
            sub=user_id,
            exp=expires_at,
            iat=issued_at,
            type=TokenType.ACCESS
        )

        encoded_jwt = jwt.encode(
            to_encode.model_dump(),
            self.secret_key,
            algorithm=self.algorithm
        )

        return TokenResponse(
            access_token=encoded_jwt,
            expires_in=int(expires_delta.total_seconds())
        )

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify a JWT token and return its payload
        Raises UnauthorizedError if token is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
            token_data = TokenPayload(**payload)

            if token_data.type != TokenType.ACCESS:
                logger.warning("Token type mismatch", extra={"actual_type": token_data.type})
                raise UnauthorizedError("Invalid token type")

            return token_data

        except ExpiredSignatureError:
            logger.info("Token expired")
            raise UnauthorizedError("Token has expired")

        except (InvalidTokenError, ValueError) as e:
            logger.warning("Invalid token", extra={"error": str(e)})
            raise UnauthorizedError("Invalid token")
