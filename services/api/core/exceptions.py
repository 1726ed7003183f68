"""
Custom exception classes.

Represent request failures that map onto an HTTP status and an
``{"error": <message>}`` body.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.response import ApiResponse, error_response

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base exception class for request failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> ApiResponse:
        return error_response(self.message, self.status_code)


class BadRequestError(ApiError):
    """Raised when request input fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class MalformedBodyError(BadRequestError):
    """Raised when a JSON body cannot be decoded."""

    default_message = "Malformed JSON body"


class PayloadTooLargeError(ApiError):
    status_code = 413
    default_message = "Request body too large"


class UnauthorizedError(ApiError):
    """Raised when the authorization gate denies a request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid API key"


class RouteNotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class UserNotFoundError(RouteNotFoundError):
    default_message = "User not found"


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    logger.warning(f"Request validation failed: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Validation Error"}
    )


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
