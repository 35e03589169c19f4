from typing import Any

from ..base import ResponsivePass
from ..context import TransformContext


class NormalizeIdenticalClassesPass(ResponsivePass):
    """Record, per element, the classes every breakpoint agrees on."""

    name = "normalize-identical-classes"
    priority = 20
    description = "Collect classes shared by all three breakpoints; they stay unprefixed"
    reads = frozenset({"matches"})
    writes = frozenset({"identical_classes"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        identical: dict[str, set[str]] = {}
        for group in context.matches:
            shared = (
                set(group.wide.classes) & set(group.medium.classes) & set(group.narrow.classes)
            )
            if shared:
                identical[group.key] = shared

        context.identical_classes = identical
        return {
            "elementsProcessed": len(context.matches),
            "totalIdenticalClasses": sum(len(v) for v in identical.values()),
        }
