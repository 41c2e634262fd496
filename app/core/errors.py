from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

SCHEMA_ERROR = "Schema Validation Error"
_VALUE_ERROR_PREFIX = "Value error, "
_LOG = logging.getLogger("app.http")


def _error_location(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


def schema_error_messages(errors: Iterable[dict]) -> list[str]:
    """Flatten pydantic errors into ``"<location>: <message>"`` lines, one per violation."""
    messages: list[str] = []
    for error in errors:
        message = str(error.get("msg") or "Invalid value")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        messages.append(f"{_error_location(error.get('loc') or ())}: {message}")
    return messages


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _schema_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = schema_error_messages(exc.errors())
        request_id = getattr(request.state, "request_id", None)
        _LOG.info(
            "schema rejected path=%s errors=%s request_id=%s",
            request.url.path,
            len(messages),
            request_id,
        )
        return JSONResponse(
            status_code=422,
            content={
                "detail": {
                    "error": SCHEMA_ERROR,
                    "message": ", ".join(messages),
                    "errors": messages,
                    "request_id": request_id,
                }
            },
        )
