"""
Error-handling middleware — maps scheduler errors to RFC 7807 responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smalljob.api.schemas.common import ErrorDetail, ProblemDetail
from smalljob.core.errors import InvalidRequestError, SmallJobError
from smalljob.core.logging import get_logger

logger = get_logger(__name__)

# ── Error code → HTTP status mapping ─────────────────────────────────────

ERROR_CODE_TO_STATUS: dict[str, int] = {
    "VALIDATION_FAILED": 400,
    "INVALID_INPUT": 400,
    "CONFLICT": 409,
    "CONFIG": 500,
    "INTERNAL": 500,
}


def status_for_error_code(code: str) -> int:
    """Resolve an error code to HTTP status, defaulting to 500."""
    return ERROR_CODE_TO_STATUS.get(code, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
    )
    if errors:
        body.errors = [ErrorDetail(**e) for e in errors]
    return JSONResponse(status_code=status, content=body.model_dump())


async def smalljob_error_handler(request: Request, exc: SmallJobError) -> JSONResponse:
    """Rejected commands (bad time, busy slot) — core state is unchanged."""
    status = status_for_error_code(exc.code)
    errors = None
    if isinstance(exc, InvalidRequestError):
        errors = [{"code": exc.code, "message": exc.message, "field": exc.field}]
    logger.info("request_rejected", path=request.url.path, status=status, **exc.to_dict())
    return problem_response(
        status=status,
        title=exc.message,
        instance=request.url.path,
        errors=errors,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400, like other invalid requests."""
    errors = [
        {
            "code": "VALIDATION_FAILED",
            "message": err.get("msg", "Invalid value"),
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body") or None,
        }
        for err in exc.errors()
    ]
    return problem_response(
        status=400,
        title="Invalid request",
        instance=request.url.path,
        errors=errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — returns 500 with ProblemDetail."""
    logger.exception("unhandled_exception", path=request.url.path)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if request.app.state.settings.debug else "An unexpected error occurred.",
        instance=str(request.url),
    )
