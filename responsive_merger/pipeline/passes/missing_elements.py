from typing import Any

from ..base import ResponsivePass
from ..context import TransformContext


class DetectMissingElementsPass(ResponsivePass):
    """Find named elements that a narrower breakpoint leaves out.

    An element named in the wide and medium trees but not in the narrow one
    is missing in narrow; named in wide and narrow but not medium, it is
    missing in medium.
    """

    name = "detect-missing-elements"
    priority = 10
    description = "Detect elements present in wider breakpoints but absent in narrower ones"
    reads = frozenset({"trees"})
    writes = frozenset({"missing_in_narrow", "missing_in_medium"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        wide = context.wide_tree.data_names()
        medium = context.medium_tree.data_names()
        narrow = context.narrow_tree.data_names()

        context.missing_in_narrow = (wide & medium) - narrow
        context.missing_in_medium = (wide & narrow) - medium

        return {
            "elementsDetected": len(context.missing_in_narrow) + len(context.missing_in_medium),
            "elements": sorted(context.missing_in_narrow),
            "elementsInMedium": len(context.missing_in_medium),
            "mediumElements": sorted(context.missing_in_medium),
        }
