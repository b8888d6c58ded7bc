"""
Custom exception classes.

Represent errors raised while resolving and invoking functions.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FunctionInvocationError(Exception):
    """Base exception class for function invocation."""

    pass


class FunctionNotFoundError(FunctionInvocationError):
    """Raised when no function, consumer or supplier matches a request."""

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"Function not found: {function_name}")


class InvalidInvocationError(FunctionInvocationError, ValueError):
    """Raised when a resolved target cannot serve the request (no such function)."""

    def __init__(self, detail: str = "no such function"):
        self.detail = detail
        super().__init__(detail)


class InputConversionError(FunctionInvocationError, ValueError):
    """Raised when a request body cannot be converted to the declared input type."""

    def __init__(self, function_name: str, cause: Exception):
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Failed to convert input for {function_name}: {cause}")


class FunctionRegistrationError(FunctionInvocationError):
    """Raised when a function cannot be registered in the catalog."""

    def __init__(self, function_name: str, cause: object):
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Failed to register function {function_name}: {cause}")


class CloudEventValidationError(ValueError):
    """Raised when a required cloud event attribute is missing or blank."""

    pass


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    error_detail = str(exc)
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
        content={"message": "Internal Server Error", "detail": error_detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=422,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
