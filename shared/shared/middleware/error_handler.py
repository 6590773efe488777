"""JSON error envelope.

Every error leaving the service has the shape::

    {"error": "<stable message>", "details": ..., "request_id": "..."}

``details`` carries field-level validation problems, or the underlying
exception message when internal details are exposed (non-production).
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _envelope(request: Request, body: dict[str, Any]) -> dict[str, Any]:
    return {**body, "request_id": getattr(request.state, "request_id", None)}


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix FastAPI puts in front of the field path
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


def install_error_handlers(app: FastAPI, *, expose_details: bool) -> None:
    """Register exception handlers and the catch-all middleware on ``app``."""

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope(
                request,
                {"error": "Validation failed", "details": _field_errors(exc)},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if isinstance(exc.detail, dict):
            body = dict(exc.detail)
            if not expose_details and exc.status_code >= 500:
                body.pop("details", None)
        else:
            body = {"error": str(exc.detail)}
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(request, body),
            headers=getattr(exc, "headers", None),
        )

    async def error_envelope_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            body: dict[str, Any] = {"error": "Internal server error"}
            if expose_details:
                body["details"] = str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=_envelope(request, body),
            )

    app.middleware("http")(error_envelope_middleware)
