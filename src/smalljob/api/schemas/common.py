"""
Common API schemas — RFC 7807 error envelope.

Every non-2xx response from smalljob is a :class:`ProblemDetail`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Structured error detail for field-level errors.

    UI Hints:
        Display field errors next to the corresponding form input.
    """

    code: str = Field(description="Machine-readable error code (e.g., 'VALIDATION_FAILED')")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Request field the error refers to")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``VALIDATION_FAILED`` (400): unparseable/past time, negative durations
        - ``CONFLICT`` (409): a job is running; the slot cannot be rescheduled yet
        - ``INTERNAL`` (500): unexpected server error

    Example:
        {
            "type": "about:blank",
            "title": "Scheduled time is not in the future",
            "status": 400,
            "detail": "",
            "instance": "/small/api/set",
            "errors": [{"code": "VALIDATION_FAILED", "message": "...", "field": "time"}]
        }
    """

    type: str = Field(default="about:blank", description="Error type URI (usually 'about:blank')")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    errors: list[ErrorDetail] = Field(
        default_factory=list,
        description="List of field-level error details",
    )
