"""API schemas — Pydantic models for request/response bodies."""

from smalljob.api.schemas.common import ErrorDetail, ProblemDetail
from smalljob.api.schemas.small import (
    CancelResponse,
    HistoryItemSchema,
    SetScheduleBody,
    SetScheduleResponse,
    StatusResponse,
)

__all__ = [
    "ErrorDetail",
    "ProblemDetail",
    "CancelResponse",
    "HistoryItemSchema",
    "SetScheduleBody",
    "SetScheduleResponse",
    "StatusResponse",
]
