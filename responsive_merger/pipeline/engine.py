"""
Pipeline coordinator for the responsive transform passes.

The pipeline is a static, explicit list of passes sorted by priority. Pass
dependencies are checked when the pipeline is built: every working set a
pass reads must be written by a pass that runs before it. At run time a
failing pass is recorded as a failed outcome and, unless the configuration
says otherwise, the remaining passes still run on whatever state exists.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..config import MergerConfig
from ..performance.timing import PerformanceTimer
from .base import PassError, PassOutcome, ResponsivePass
from .context import TransformContext

logger = logging.getLogger(__name__)


class PipelineConfigurationError(Exception):
    """The pass list violates a read-before-write dependency or is ambiguous."""


@dataclass
class PipelineResult:
    """Result of one pipeline run."""

    outcomes: list[PassOutcome] = field(default_factory=list)
    execution_time_ms: float = 0.0
    passes_skipped: int = 0

    @property
    def errors(self) -> list[PassError]:
        return [o.error for o in self.outcomes if o.error is not None]

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def passes_executed(self) -> int:
        return len(self.outcomes)

    @property
    def stats(self) -> dict[str, dict[str, Any]]:
        return {outcome.name: outcome.to_stats() for outcome in self.outcomes}

    def to_dict(self) -> dict:
        return {
            "stats": self.stats,
            "errors": [e.to_dict() for e in self.errors],
            "execution_time_ms": self.execution_time_ms,
            "passes_executed": self.passes_executed,
            "passes_skipped": self.passes_skipped,
        }


class ResponsivePipeline:
    """Runs the transform passes over a TransformContext.

    Example usage:
        pipeline = ResponsivePipeline(config=config)
        context = TransformContext(trees=trees, widths=widths, config=config)
        result = pipeline.run(context)
        merged_source = context.generate()
    """

    def __init__(
        self,
        passes: Iterable[ResponsivePass] | None = None,
        config: MergerConfig | None = None,
    ):
        if passes is None:
            from .passes import default_passes

            passes = default_passes()
        self.config = config or MergerConfig()
        # sorted() is stable, equal priorities keep registration order
        self.passes: list[ResponsivePass] = sorted(passes, key=lambda p: p.priority)
        self.validate_dependencies()

    def validate_dependencies(self) -> None:
        """Check names are unique and each read is preceded by a write."""
        names = [p.name for p in self.passes]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise PipelineConfigurationError(f"Duplicate pass names: {', '.join(duplicates)}")

        available = set(TransformContext.BASE_FIELDS)
        for transform in self.passes:
            missing = set(transform.reads) - available
            if missing:
                raise PipelineConfigurationError(
                    f"Pass {transform.name} (priority {transform.priority}) reads "
                    f"{', '.join(sorted(missing))} before any earlier pass writes it"
                )
            available.update(transform.writes)

    @property
    def enabled_passes(self) -> list[ResponsivePass]:
        disabled = set(self.config.disabled_passes)
        return [p for p in self.passes if p.name not in disabled]

    def run(self, context: TransformContext) -> PipelineResult:
        """Run every enabled pass in priority order.

        Args:
            context: Shared context holding the three trees.

        Returns:
            PipelineResult with one outcome per executed pass. The same
            stats records are stored in ``context.stats``.
        """
        start_time = time.time()
        enabled = self.enabled_passes
        result = PipelineResult(passes_skipped=len(self.passes) - len(enabled))

        for transform in enabled:
            outcome = self._execute_pass(transform, context)
            result.outcomes.append(outcome)
            context.stats[transform.name] = outcome.to_stats()

            if not outcome.success and not self.config.continue_on_error:
                logger.warning(f"Stopping pipeline after failed pass {transform.name}")
                break

        result.execution_time_ms = (time.time() - start_time) * 1000
        return result

    def _execute_pass(
        self, transform: ResponsivePass, context: TransformContext
    ) -> PassOutcome:
        """Execute a single pass, turning any exception into a failed outcome."""
        timer = PerformanceTimer(transform.name)
        try:
            with timer:
                stats = transform.execute(context)
        except Exception as e:
            logger.warning(
                f"Pass {transform.name} failed: {e}",
                extra={"pass_name": transform.name, "component": context.component},
            )
            return PassOutcome.failed(transform.name, e, timer.duration_ms)

        return PassOutcome.succeeded(transform.name, stats or {}, timer.duration_ms)


def format_pipeline_stats(stats: dict[str, dict[str, Any]]) -> str:
    """Render per-pass stats as one line per pass."""
    lines = []
    for name, pass_stats in stats.items():
        if "error" in pass_stats:
            lines.append(f"  ✗ {name}: ERROR - {pass_stats['error']}")
            continue
        execution_time = pass_stats.get("executionTime", "")
        details = ", ".join(
            f"{key}={value}"
            for key, value in pass_stats.items()
            if key != "executionTime" and not isinstance(value, (list, dict))
        )
        lines.append(f"  ✓ {name} ({execution_time}): {details}".rstrip(": "))
    return "\n".join(lines)
