"""Transform passes, in the order the pipeline runs them."""

from .class_conflicts import DetectClassConflictsPass
from .correlate import CorrelateElementsPass
from .identical_classes import NormalizeIdenticalClassesPass
from .merge_classes import MergeClassesPass
from .missing_elements import DetectMissingElementsPass
from .reset_properties import ResetDependentPropertiesPass, reset_token
from .visibility import InjectVisibilityClassesPass


def default_passes() -> list:
    """Fresh instances of every built-in pass, in priority order."""
    return [
        CorrelateElementsPass(),
        DetectMissingElementsPass(),
        NormalizeIdenticalClassesPass(),
        DetectClassConflictsPass(),
        MergeClassesPass(),
        ResetDependentPropertiesPass(),
        InjectVisibilityClassesPass(),
    ]


__all__ = [
    "CorrelateElementsPass",
    "DetectMissingElementsPass",
    "NormalizeIdenticalClassesPass",
    "DetectClassConflictsPass",
    "MergeClassesPass",
    "ResetDependentPropertiesPass",
    "InjectVisibilityClassesPass",
    "default_passes",
    "reset_token",
]
