"""Timing utilities for merge runs.

- `@timed` decorator for function timing
- `PerformanceTimer` context manager for timing a block (used per pass)
"""

from .timing import PerformanceTimer, format_duration, timed

__all__ = ["PerformanceTimer", "format_duration", "timed"]
