"""Reset layout constraints that would leak into wider breakpoints.

Each breakpoint export carries complete, independent layout constraints. A
narrow-only ``max-w-[360px]`` that the merge drops would leave the narrow
layout unconstrained, while keeping it unprefixed would constrain the wide
layout as well. This pass reinstates such dropped constraints and cancels
them at the next breakpoint with an explicit reset class. It also resets
flex sizing on the children of an element whose flex direction changes at
a breakpoint, since basis and grow tuned for a column are wrong for a row.
"""

import re
from typing import Any

from ...analysis.elements import Element
from ..base import ResponsivePass
from ..classes import (
    CONFLICT_GROUPS,
    BreakpointPrefixes,
    DroppedClass,
    Tier,
    conflict_group,
    sort_responsive_classes,
)
from ..context import TransformContext

RESET_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^max-w-"), "max-w-none"),
    (re.compile(r"^max-h-"), "max-h-none"),
    (re.compile(r"^min-w-"), "min-w-0"),
    (re.compile(r"^min-h-"), "min-h-0"),
    (re.compile(r"^basis-"), "basis-auto"),
    (re.compile(r"^grow$"), "grow-0"),
    (re.compile(r"^shrink-0$"), "shrink"),
    (re.compile(r"^w-"), "w-auto"),
    (re.compile(r"^h-"), "h-auto"),
)

# Child sizing that depends on the parent's flex direction
DIRECTION_DEPENDENT_RESETS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^basis-(?!auto$)"), "basis-auto"),
    (re.compile(r"^grow$"), "grow-0"),
    (re.compile(r"^shrink-0$"), "shrink"),
)

RULE_RESTORE = "restore-dropped-constraints"
RULE_DIRECTION = "direction-change-children"


def reset_token(class_name: str) -> str | None:
    """Class that undoes ``class_name`` at a wider breakpoint, if one exists."""
    for pattern, reset in RESET_RULES:
        if pattern.match(class_name):
            return reset if reset != class_name else None
    return None


def _has_group_at_tier(
    classes: list[str], tier: Tier, group: str | None, prefixes: BreakpointPrefixes
) -> bool:
    if group is None:
        return False
    return any(conflict_group(c) == group for c in prefixes.at_tier(classes, tier))


class ResetDependentPropertiesPass(ResponsivePass):
    name = "reset-dependent-properties"
    priority = 45
    description = "Reinstate dropped size constraints with explicit resets at wider breakpoints"
    reads = frozenset({"matches", "dropped_classes"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        prefixes = context.prefixes
        resets_by_rule = {RULE_RESTORE: 0, RULE_DIRECTION: 0}
        touched: set[int] = set()

        for group in context.matches:
            dropped = context.dropped_classes.get(group.key, [])
            added = self._restore_dropped(group.wide, dropped, prefixes)
            if added:
                resets_by_rule[RULE_RESTORE] += added
                touched.add(id(group.wide))

        for group in context.matches:
            for child, added in self._reset_children(group.wide, prefixes):
                resets_by_rule[RULE_DIRECTION] += added
                touched.add(id(child))

        return {
            "elementsProcessed": len(touched),
            "totalResetsAdded": sum(resets_by_rule.values()),
            "resetsByRule": resets_by_rule,
        }

    def _restore_dropped(
        self, element: Element, dropped: list[DroppedClass], prefixes: BreakpointPrefixes
    ) -> int:
        if not dropped or not element.can_update_classes:
            return 0
        classes = element.classes
        added = 0
        for item in dropped:
            reset = reset_token(item.class_name)
            if reset is None:
                continue
            if _has_group_at_tier(classes, item.removed_at, conflict_group(reset), prefixes):
                continue
            classes.append(prefixes.apply(item.origin, item.class_name))
            classes.append(prefixes.apply(item.removed_at, reset))
            added += 1
        if added:
            element.set_classes(sort_responsive_classes(classes, prefixes))
        return added

    def _reset_children(
        self, parent: Element, prefixes: BreakpointPrefixes
    ) -> list[tuple[Element, int]]:
        directions = CONFLICT_GROUPS["flexDirection"]
        changed_tiers = [
            tier
            for tier in (Tier.MEDIUM, Tier.WIDE)
            if any(c in directions for c in prefixes.at_tier(parent.classes, tier))
        ]
        if not changed_tiers:
            return []

        results = []
        for child in parent.children:
            if not child.can_update_classes:
                continue
            classes = child.classes
            base = prefixes.at_tier(classes, Tier.BASE)
            added = 0
            for tier in changed_tiers:
                for pattern, reset in DIRECTION_DEPENDENT_RESETS:
                    if not any(pattern.match(c) for c in base):
                        continue
                    if _has_group_at_tier(classes, tier, conflict_group(reset), prefixes):
                        continue
                    classes.append(prefixes.apply(tier, reset))
                    added += 1
            if added:
                child.set_classes(sort_responsive_classes(classes, prefixes))
                results.append((child, added))
        return results
