"""Performance timing decorators and utilities.

This module provides tools for measuring and logging execution times:
- @timed decorator for function timing
- PerformanceTimer context manager for code block timing
"""

import functools
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from ..merger_logging import get_logger

P = ParamSpec("P")
T = TypeVar("T")


def format_duration(duration_ms: float) -> str:
    """Render a duration the way pass statistics report it (e.g. ``"12ms"``)."""
    return f"{round(duration_ms)}ms"


def timed(
    operation_name: str | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to time function execution and log results.

    Measures the execution time of a function and logs it at DEBUG level.
    The timing information is also available as extra fields for JSON logging.

    Args:
        operation_name: Custom name for the operation (defaults to function name).

    Returns:
        Decorator function.

    Example:
        >>> @timed("merge_component")
        ... def merge(name: str) -> MergedComponent:
        ...     ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            logger = get_logger()
            op_name = operation_name or func.__name__

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"[PERF] {op_name} failed after {duration_ms:.2f}ms: {e}",
                    extra={"duration_ms": duration_ms, "operation": op_name},
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                f"[PERF] {op_name} completed in {duration_ms:.2f}ms",
                extra={"duration_ms": duration_ms, "operation": op_name},
            )
            return result

        return wrapper

    return decorator


class PerformanceTimer:
    """Context manager for timing code blocks.

    The duration is available as an attribute after the context exits.

    Attributes:
        operation_name: Name of the operation being timed.
        auto_log: Whether to automatically log timing.
        duration_ms: Execution time in milliseconds.

    Example:
        >>> with PerformanceTimer("merge-classes") as timer:
        ...     stats = transform.execute(context)
        >>> print(f"Merged in {timer.duration_ms:.2f}ms")
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float = 0
        self.end_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "PerformanceTimer":
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Stop timing and optionally log."""
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000

        if self.auto_log:
            logger = get_logger()
            extra = {"duration_ms": self.duration_ms, "operation": self.operation_name}
            if exc_type is None:
                logger.debug(
                    f"[PERF] {self.operation_name}: {self.duration_ms:.2f}ms",
                    extra=extra,
                )
            else:
                logger.debug(
                    f"[PERF] {self.operation_name} failed after {self.duration_ms:.2f}ms",
                    extra=extra,
                )

    @property
    def formatted(self) -> str:
        """Duration formatted for statistics output."""
        return format_duration(self.duration_ms)
