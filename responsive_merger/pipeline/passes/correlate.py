from typing import Any

from ...breakpoints.loader import BreakpointRole
from ..base import ResponsivePass
from ..context import TransformContext
from ..matching import ElementMatcher, MatchStrategy


class CorrelateElementsPass(ResponsivePass):
    """Pair up wide, medium and narrow elements."""

    name = "correlate-elements"
    priority = 5
    description = "Correlate elements across breakpoints by identity, then by position"
    reads = frozenset({"trees"})
    writes = frozenset({"matches", "unmatched"})

    def execute(self, context: TransformContext) -> dict[str, Any]:
        matcher = ElementMatcher(context.config.position_similarity_threshold)
        correlation = matcher.correlate(
            context.wide_tree, context.medium_tree, context.narrow_tree
        )
        context.matches = correlation.groups
        context.unmatched = {
            BreakpointRole.MEDIUM: correlation.unmatched_medium,
            BreakpointRole.NARROW: correlation.unmatched_narrow,
        }
        return {
            "groupsMatched": len(correlation.groups),
            "matchedByNodeId": correlation.count(MatchStrategy.NODE_ID),
            "matchedByDataName": correlation.count(MatchStrategy.DATA_NAME),
            "matchedByPosition": correlation.count(MatchStrategy.POSITION),
            "unmatchedInMedium": len(correlation.unmatched_medium),
            "unmatchedInNarrow": len(correlation.unmatched_narrow),
        }
