from typing import Any

from ...breakpoints.loader import BreakpointRole
from ..base import ResponsivePass
from ..classes import Tier, merge_class_lists, sort_responsive_classes
from ..context import TransformContext


class MergeClassesPass(ResponsivePass):
    """Rewrite each matched element's classes as one mobile-first list."""

    name = "merge-classes"
    priority = 40
    description = "Merge narrow, medium and wide classes into prefixed responsive classes"
    reads = frozenset({"matches", "unmatched", "identical_classes", "class_conflicts"})
    writes = frozenset({"dropped_classes"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        prefixes = context.prefixes
        merged = 0
        unchanged = 0
        read_only = 0
        total_prefixed = 0
        total_dropped = 0

        for group in context.matches:
            narrow = group.narrow.classes
            medium = group.medium.classes
            wide = group.wide.classes
            if narrow == medium == wide:
                unchanged += 1
                continue

            conflicting = {c.group for c in context.class_conflicts.get(group.key, [])}
            result = merge_class_lists(narrow, medium, wide, prefixes, conflicting)
            # Classes shared by every breakpoint always apply unconditionally
            identical = context.identical_classes.get(group.key, set())
            classes = sort_responsive_classes(set(result.classes) | identical, prefixes)

            if not group.wide.set_classes(classes):
                read_only += 1
                continue

            merged += 1
            total_prefixed += sum(
                1 for token in classes if prefixes.split(token)[0] != Tier.BASE
            )
            if result.dropped:
                context.dropped_classes[group.key] = result.dropped
                total_dropped += len(result.dropped)

        unmatched_keys = set(context.unmatched.get(BreakpointRole.MEDIUM, [])) | set(
            context.unmatched.get(BreakpointRole.NARROW, [])
        )
        return {
            "elementsMerged": merged,
            "elementsUnchanged": unchanged,
            "totalClassesMerged": total_prefixed,
            "classesDropped": total_dropped,
            "skippedReadOnly": read_only,
            "skippedNoMatch": len(unmatched_keys),
        }
