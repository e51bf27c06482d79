"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from nexoscore.domain.exceptions import (
    BatchAlreadyRunningException,
    DomainException,
    InvalidIdentifierException,
    MerchantNotFoundException,
    UnauthorizedException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, exc: DomainException) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": exc.message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(MerchantNotFoundException)
    async def merchant_not_found_handler(
        request: Request,
        exc: MerchantNotFoundException,
    ) -> JSONResponse:
        """Handle unknown merchant identifiers."""
        return _error_response(404, exc)

    @app.exception_handler(InvalidIdentifierException)
    async def invalid_identifier_handler(
        request: Request,
        exc: InvalidIdentifierException,
    ) -> JSONResponse:
        """Handle malformed lookup identifiers."""
        return _error_response(400, exc)

    @app.exception_handler(UnauthorizedException)
    async def unauthorized_handler(
        request: Request,
        exc: UnauthorizedException,
    ) -> JSONResponse:
        """Handle missing or wrong API keys."""
        logger.warning("unauthorized_request", path=request.url.path)
        return _error_response(401, exc)

    @app.exception_handler(BatchAlreadyRunningException)
    async def batch_running_handler(
        request: Request,
        exc: BatchAlreadyRunningException,
    ) -> JSONResponse:
        """Handle a batch trigger while a run is in progress."""
        return _error_response(409, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
