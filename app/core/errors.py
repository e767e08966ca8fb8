"""
Error envelope and exception handlers.

Every API error is rendered as ``{"error": ..., "message": ...}``.
"""

import logging
from http import HTTPStatus
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Invalid input"


class LoginRequiredError(Exception):
    """Raised by the page guard when no user is logged in."""

    def __init__(self, login_url: str = "/login"):
        super().__init__("Login required")
        self.login_url = login_url


def error_body(error: str, message: Optional[Any] = None) -> dict:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    return body


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = error_body(_reason_phrase(exc.status_code), exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
    logger.info("Rejected request to %s: invalid fields %s", request.url.path, fields)
    content = error_body(_reason_phrase(status.HTTP_400_BAD_REQUEST), INVALID_INPUT_MESSAGE)
    content["fields"] = fields
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def login_required_handler(request: Request, exc: LoginRequiredError) -> RedirectResponse:
    return RedirectResponse(url=exc.login_url, status_code=status.HTTP_303_SEE_OTHER)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(LoginRequiredError, login_required_handler)
