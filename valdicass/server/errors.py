from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup configuration is missing or unusable."""


class TokenVerificationError(Exception):
    """The identity provider rejected a bearer token."""


class RelayError(Exception):
    """
    Base for every failure that maps to an HTTP response.

    `message` is what the caller sees; anything more detailed belongs in the log.
    """

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(RelayError):
    status_code = 400
    default_message = "Bad request."


class Unauthenticated(RelayError):
    status_code = 401
    default_message = "Unauthorized: No token provided."


class Forbidden(RelayError):
    status_code = 403
    default_message = "Forbidden."


class NotFound(RelayError):
    status_code = 404
    default_message = "Quote not found."


class EmailDeliveryError(RelayError):
    status_code = 500
    default_message = "Failed to send quote."


class InternalError(RelayError):
    status_code = 500


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RelayError)
    async def _relay_error(request: Request, exc: RelayError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected body on %s: %s", request.url.path, exc.errors())
        return error_response(400, "Invalid request body.")

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error.")
