import logging
from typing import Any

from ...analysis.elements import Element
from ..base import ResponsivePass
from ..classes import (
    DISPLAY_CLASSES,
    BreakpointPrefixes,
    Tier,
    detect_display,
    sort_responsive_classes,
)
from ..context import TransformContext

logger = logging.getLogger(__name__)


class InjectVisibilityClassesPass(ResponsivePass):
    """Hide elements at the breakpoints whose export leaves them out.

    An element missing in narrow becomes ``hidden md:<display>``; one
    missing in medium gets ``md:hidden lg:<display>``. The display value is
    the element's own display class, ``block`` when it has none.
    """

    name = "inject-visibility-classes"
    priority = 50
    description = "Inject hidden/visible classes for elements missing at narrower breakpoints"
    reads = frozenset({"missing_in_narrow", "missing_in_medium"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        prefixes = context.prefixes
        injected = 0
        skipped = 0
        elements: list[str] = []

        targets = [(name, Tier.BASE) for name in sorted(context.missing_in_narrow)]
        targets += [(name, Tier.MEDIUM) for name in sorted(context.missing_in_medium)]

        for data_name, hidden_from in targets:
            for element in context.wide_tree.find_by_data_name(data_name):
                added = self._inject(element, hidden_from, prefixes)
                if added:
                    injected += added
                    elements.append(data_name)
                else:
                    logger.debug(f"Visibility unchanged for {element.describe()}")
                    skipped += 1

        return {
            "visibilityClassesInjected": injected,
            "elements": elements,
            "skipped": skipped,
        }

    def _inject(self, element: Element, hidden_from: Tier, prefixes: BreakpointPrefixes) -> int:
        if not element.can_update_classes:
            return 0
        classes = element.classes
        hidden = prefixes.apply(hidden_from, "hidden")
        if hidden in classes:
            return 0

        display = detect_display(classes, prefixes)
        shown_from = Tier(hidden_from + 1)
        if hidden_from is Tier.BASE:
            classes = [c for c in classes if c not in DISPLAY_CLASSES]
        classes += [hidden, prefixes.apply(shown_from, display)]
        element.set_classes(sort_responsive_classes(classes, prefixes))
        return 2
