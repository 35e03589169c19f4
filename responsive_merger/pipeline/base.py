"""
Base classes and types for the responsive transform pipeline.

A pass is one step of the merge. Passes run in ascending priority over a
shared TransformContext and declare which context working sets they read
and write so the pipeline can check their ordering up front.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..performance.timing import format_duration

if TYPE_CHECKING:
    from .context import TransformContext


@dataclass
class PassError:
    """Error that occurred during pass execution."""

    pass_name: str
    error_message: str
    exception_type: str | None = None

    def to_dict(self) -> dict:
        return {
            "pass_name": self.pass_name,
            "error_message": self.error_message,
            "exception_type": self.exception_type,
        }


@dataclass
class PassOutcome:
    """Tagged result of one pass: statistics on success, an error otherwise."""

    name: str
    stats: dict[str, Any] = field(default_factory=dict)
    execution_time_ms: float = 0.0
    error: PassError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(
        cls, name: str, stats: dict[str, Any], execution_time_ms: float = 0.0
    ) -> "PassOutcome":
        return cls(name=name, stats=stats, execution_time_ms=execution_time_ms)

    @classmethod
    def failed(
        cls, name: str, error: Exception | str, execution_time_ms: float = 0.0
    ) -> "PassOutcome":
        exception_type = type(error).__name__ if isinstance(error, Exception) else None
        return cls(
            name=name,
            execution_time_ms=execution_time_ms,
            error=PassError(name, str(error), exception_type),
        )

    def to_stats(self) -> dict[str, Any]:
        """Stats record as stored in the context and the merge report."""
        if self.error is not None:
            return {"error": self.error.error_message}
        return {**self.stats, "executionTime": format_duration(self.execution_time_ms)}


class ResponsivePass(ABC):
    """Abstract base class for pipeline passes.

    Subclasses set ``name``, ``priority`` and the working sets they
    ``reads``/``writes`` (TransformContext field names) and implement
    ``execute``, which mutates the context and returns a stats dict.
    """

    name: str = ""
    priority: int = 100
    description: str = ""
    reads: frozenset[str] = frozenset()
    writes: frozenset[str] = frozenset()

    @abstractmethod
    def execute(self, context: TransformContext) -> dict[str, Any]:
        """Run the pass over the context and return its statistics."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} priority={self.priority}>"
