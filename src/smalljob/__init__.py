"""
smalljob - single-slot deferred job scheduler.

Schedule one job at a future wall-clock time, watch it move through
Idle → Scheduled → Working → Idle, and read back the recent history.
"""

__version__ = "0.1.0"
