"""
smalljob core — scheduler state machine, errors, logging and settings.

Nothing in this package imports FastAPI; the HTTP surface lives in
:mod:`smalljob.api` and only consumes the scheduler's command interface.
"""

from smalljob.core.errors import (
    ConfigError,
    ExecutionFailure,
    IllegalTransitionError,
    InvalidRequestError,
    SlotBusyError,
    SmallJobError,
)

__all__ = [
    "SmallJobError",
    "InvalidRequestError",
    "SlotBusyError",
    "ExecutionFailure",
    "IllegalTransitionError",
    "ConfigError",
]
