"""
Structured error types for smalljob.

Every error raised by the scheduler core extends :class:`SmallJobError` so
the HTTP layer can map it to a status code without inspecting messages.

Manifesto:
    - **Typed hierarchy:** one class per failure mode the caller can act on
    - **Machine-readable codes:** ``code`` drives the HTTP status mapping
    - **Error chaining:** the original exception is kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     SmallJobError                         │
        │          (category, code, context, cause)                 │
        ├──────────────────────────────────────────────────────────┤
        │  InvalidRequestError   SlotBusyError    ConfigError      │
        │  (VALIDATION_FAILED)   (CONFLICT)       (CONFIG)         │
        │                                                          │
        │  ExecutionFailure      IllegalTransitionError            │
        │  (INTERNAL, history)   (INTERNAL, defect)                │
        └──────────────────────────────────────────────────────────┘

    ``InvalidRequestError`` and ``SlotBusyError`` reach API callers.
    ``ExecutionFailure`` is only ever recorded in the history ledger.
    ``IllegalTransitionError`` signals a bug in the state machine.

Tags:
    error-handling, exception-hierarchy, smalljob

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    EXECUTION = "EXECUTION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error."""

    generation: int | None = None
    scheduled_time: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        if self.generation is not None:
            result["generation"] = self.generation
        if self.scheduled_time is not None:
            result["scheduled_time"] = self.scheduled_time
        if self.metadata:
            result.update(self.metadata)
        return result


class SmallJobError(Exception):
    """Base exception for all smalljob errors.

    Subclasses set ``default_category`` and ``code``; ``code`` is the key
    used by :mod:`smalljob.api.middleware.errors` to pick an HTTP status.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SmallJobError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "code": self.code,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class InvalidRequestError(SmallJobError):
    """Malformed or past-dated schedule request.

    Core state is never modified when this is raised.
    """

    default_category = ErrorCategory.VALIDATION
    code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class SlotBusyError(SmallJobError):
    """A job is running; the slot cannot accept a new schedule until it ends."""

    default_category = ErrorCategory.CONFLICT
    code = "CONFLICT"


class ExecutionFailure(SmallJobError):
    """The job body raised. Recorded in history, never surfaced to API callers."""

    default_category = ErrorCategory.EXECUTION
    code = "INTERNAL"


class IllegalTransitionError(SmallJobError):
    """A status transition outside the allowed set was attempted."""

    default_category = ErrorCategory.INTERNAL
    code = "INTERNAL"


class ConfigError(SmallJobError):
    """Missing or invalid configuration value."""

    default_category = ErrorCategory.CONFIG
    code = "CONFIG"


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SmallJobError",
    "InvalidRequestError",
    "SlotBusyError",
    "ExecutionFailure",
    "IllegalTransitionError",
    "ConfigError",
]
