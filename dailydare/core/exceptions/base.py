from typing import Any, Optional
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        detail: Optional[Any] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail if detail is not None else message)
        self.message = message


class UnauthorizedError(BaseAPIException):
    def __init__(self, message: str = "Unauthorized", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            detail=detail,
        )


class ProfileCorruptedError(Exception):
    """Stored profile document could not be parsed.

    Raised rather than returned as a failure result.
    """

    def __init__(self, user_id: str, reason: str):
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"Profile document for {user_id} is malformed: {reason}")


class ProfileConflictError(Exception):
    """Optimistic concurrency retries were exhausted for a profile update."""

    def __init__(self, user_id: str, attempts: int):
        self.user_id = user_id
        self.attempts = attempts
        super().__init__(f"Profile {user_id} changed concurrently {attempts} times in a row")


class BonusDareGenerationError(Exception):
    """The text model could not produce a usable dare."""
