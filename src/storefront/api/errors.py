"""Mapping of storefront errors to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import logger
from storefront.errors import (
    Conflict,
    Forbidden,
    InsufficientStock,
    InvalidRequest,
    InvalidTransition,
    NotFound,
    StorefrontError,
    Unauthorized,
)

ERROR_STATUS_CODES = {
    InvalidRequest: 400,
    InsufficientStock: 400,
    InvalidTransition: 400,
    Unauthorized: 401,
    Forbidden: 403,
    NotFound: 404,
    Conflict: 409,
}


def status_code_for(exc: StorefrontError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_class]
    return 400


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=status_code,
        message=exc.message,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers (validation, not-found) and the storefront taxonomy."""
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
