from typing import Any

from ..base import ResponsivePass
from ..classes import ClassConflict, detect_conflicts
from ..context import TransformContext


class DetectClassConflictsPass(ResponsivePass):
    """Find mutually exclusive classes that change between breakpoints.

    ``flex-row`` on wide and ``flex-col`` on narrow, or ``gap-2`` against
    ``gap-4``, are conflicts: the merge keeps the narrower class in place
    and lets the wider breakpoint override it.
    """

    name = "detect-class-conflicts"
    priority = 30
    description = "Detect mutually exclusive classes (flex-row vs flex-col, gap-2 vs gap-4, ...)"
    reads = frozenset({"matches"})
    writes = frozenset({"class_conflicts"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        conflicts: dict[str, list[ClassConflict]] = {}
        for group in context.matches:
            found = detect_conflicts(
                group.narrow.classes, group.medium.classes, group.wide.classes
            )
            if found:
                conflicts[group.key] = found

        context.class_conflicts = conflicts
        return {
            "elementsWithConflicts": len(conflicts),
            "totalConflicts": sum(len(v) for v in conflicts.values()),
        }
