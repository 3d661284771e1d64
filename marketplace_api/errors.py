"""
Kernel error to HTTP response mapping.

Responsibility:
    One exception handler per error family.  Kernel errors are mapped by
    category (isinstance against the hierarchy in
    ``marketplace_kernel.exceptions``), so a new subclass inherits the
    status of its parent without touching this module.

Response body:
    ``{"error": <code>, "message": <text>}`` for every failure.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from marketplace_api.schemas import ErrorResponse
from marketplace_kernel.exceptions import (
    AmountError,
    AuthenticationRequiredError,
    AuthorizationError,
    ConcurrencyError,
    MarketplaceKernelError,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from marketplace_kernel.logging_config import get_logger

logger = get_logger("api.errors")

# First match wins
STATUS_BY_CATEGORY: tuple[tuple[type[MarketplaceKernelError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (PaymentError, status.HTTP_400_BAD_REQUEST),
    (AmountError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConcurrencyError, status.HTTP_409_CONFLICT),
)


def status_for(exc: MarketplaceKernelError) -> int:
    for category, code in STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(code: str, message: str) -> dict[str, str]:
    return ErrorResponse(error=code, message=message).model_dump()


async def kernel_error_handler(request: Request, exc: MarketplaceKernelError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("unmapped_kernel_error", exc_info=exc)
    else:
        logger.info(
            "request_rejected",
            extra={"status_code": status_code, "error_code": exc.code},
        )
    return JSONResponse(status_code=status_code, content=error_body(exc.code, str(exc)))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed path, query or body parameters are a plain 400."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", details or "invalid request"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "Internal server error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceKernelError, kernel_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
