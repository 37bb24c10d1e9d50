from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dailydare.core.exceptions.base import UnauthorizedError
from dailydare.core.service.auth.jwt_service import JWTService
from dailydare.core.logger.logger import logger


class CustomHTTPBearer(HTTPBearer):
    """Bearer scheme that answers 401 for every missing or malformed header"""

    async def __call__(self, request: Request) -> Optional[HTTPAuthorizationCredentials]:
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            raise UnauthorizedError("Not authenticated")

        try:
            scheme, credentials = auth_header.split()
        except ValueError:
            raise UnauthorizedError("Invalid authorization header")

        if scheme.lower() != "bearer":
            raise UnauthorizedError("Invalid authentication scheme")

        return HTTPAuthorizationCredentials(scheme=scheme, credentials=credentials)


bearer_scheme = CustomHTTPBearer()


def get_jwt_service() -> JWTService:
    return JWTService()


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    jwt_service: JWTService = Depends(get_jwt_service)
) -> str:
    """Resolve the caller's user id from the bearer token"""
    try:
        token_data = jwt_service.verify_token(credentials.credentials)
    except UnauthorizedError as e:
        logger.error(f"Authentication error: {e.message}", extra={"path": request.url.path})
        raise

    request.state.user_id = token_data.sub
    return token_data.sub
