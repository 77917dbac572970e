"""
Error codes and the API exception carrying them.

Codes are part of the API contract: the UI branches on them, so existing
values must never change.
"""

from enum import Enum

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    NOT_FOUND = "NOT_FOUND"
    DIR_NOT_FOUND = "DIR_NOT_FOUND"
    NO_STATE = "NO_STATE"
    MALFORMED = "MALFORMED"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(HTTPException):
    """HTTPException with a stable error code."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NOT_FOUND,
        status_code: int = status.HTTP_404_NOT_FOUND,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code


def not_found(message: str = "Not found", code: ErrorCode = ErrorCode.NOT_FOUND) -> ApiError:
    return ApiError(message, code=code)
