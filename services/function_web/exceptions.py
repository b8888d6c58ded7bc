"""
Where: services/function_web/exceptions.py
What: Exception handler registration and function error HTTP mappings.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    CloudEventValidationError,
    FunctionNotFoundError,
    InputConversionError,
    InvalidInvocationError,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("function_web.main")


async def function_not_found_handler(request: Request, exc: FunctionNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"message": str(exc)},
    )


async def bad_request_handler(request: Request, exc: Exception):
    logger.warning(
        f"Rejected {request.method} {request.url.path}: {exc}",
        extra={"error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Bad Request", "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(FunctionNotFoundError, function_not_found_handler)
    app.add_exception_handler(InvalidInvocationError, bad_request_handler)
    app.add_exception_handler(InputConversionError, bad_request_handler)
    app.add_exception_handler(CloudEventValidationError, bad_request_handler)
