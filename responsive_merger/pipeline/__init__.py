"""Responsive transform pipeline: element correlation and class merging."""

from .base import PassError, PassOutcome, ResponsivePass
from .classes import (
    BreakpointPrefixes,
    ClassConflict,
    ClassMergeResult,
    ClassNameDiff,
    DroppedClass,
    Tier,
    class_similarity,
    conflict_group,
    detect_conflicts,
    diff_class_names,
    merge_class_lists,
    sort_responsive_classes,
)
from .context import TransformContext
from .engine import (
    PipelineConfigurationError,
    PipelineResult,
    ResponsivePipeline,
    format_pipeline_stats,
)
from .matching import Correlation, ElementGroup, ElementMatcher, MatchStrategy
from .passes import default_passes

__all__ = [
    "PassError",
    "PassOutcome",
    "ResponsivePass",
    "BreakpointPrefixes",
    "ClassConflict",
    "ClassMergeResult",
    "ClassNameDiff",
    "DroppedClass",
    "Tier",
    "class_similarity",
    "conflict_group",
    "detect_conflicts",
    "diff_class_names",
    "merge_class_lists",
    "sort_responsive_classes",
    "TransformContext",
    "PipelineConfigurationError",
    "PipelineResult",
    "ResponsivePipeline",
    "format_pipeline_stats",
    "Correlation",
    "ElementGroup",
    "ElementMatcher",
    "MatchStrategy",
    "default_passes",
]
