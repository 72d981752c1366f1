"""
Global Exception Handlers

Provides centralized exception handling for the relay. Request guard
failures are answered with the terse plain-text bodies Slack and the
gate device expect; anything unexpected becomes a JSON 500.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gaterelay.core.logging import get_logger

logger = get_logger(__name__)


class BadRequestException(Exception):
    """Request rejected before it reaches the coordinator."""

    def __init__(self, reason: str) -> None:
        """
        Initialize exception.

        Args:
            reason: Why the request was rejected; logged, never sent back
        """
        super().__init__(reason)
        self.message = reason
        self.status_code = status.HTTP_400_BAD_REQUEST


BAD_REQUEST_BODY = "Bad request."
NOT_FOUND_BODY = "Not found."


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Set up global exception handlers for the application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(BadRequestException)
    async def handle_bad_request(request: Request, exc: BadRequestException) -> PlainTextResponse:
        """Reject a malformed or unauthorized request."""
        logger.warning(
            "Rejected request",
            reason=exc.message,
            method=request.method,
            path=request.url.path,
        )
        return PlainTextResponse(BAD_REQUEST_BODY, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> PlainTextResponse:
        """Missing or malformed fields are bad requests, not 422s."""
        logger.warning(
            "Request validation error",
            errors=exc.errors(),
            path=request.url.path,
        )
        return PlainTextResponse(BAD_REQUEST_BODY, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> PlainTextResponse:
        """Unknown routes and wrong methods both read as not found."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return PlainTextResponse(NOT_FOUND_BODY, status_code=status.HTTP_404_NOT_FOUND)

        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_generic_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle all unhandled exceptions."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            traceback=traceback.format_exc(),
            path=request.url.path,
        )

        message = "Internal server error"
        if request.app.state.settings.is_development:
            message = str(exc)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "ERR_INTERNAL",
                "message": message,
            },
        )
