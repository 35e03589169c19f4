"""Shared mutable state for one merge run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..analysis.elements import ComponentTree
from ..breakpoints.loader import BreakpointRole, BreakpointWidths
from ..config import MergerConfig
from .classes import BreakpointPrefixes, ClassConflict, DroppedClass
from .matching import ElementGroup


@dataclass
class TransformContext:
    """State threaded through the passes of one merge invocation.

    ``trees`` holds the three in-progress trees; the wide tree is the one
    being rewritten. The remaining fields are the working sets passes
    publish for later passes.
    """

    trees: dict[BreakpointRole, ComponentTree]
    widths: BreakpointWidths
    config: MergerConfig = field(default_factory=MergerConfig)
    component: str | None = None
    stats: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Working sets
    matches: list[ElementGroup] = field(default_factory=list)
    unmatched: dict[BreakpointRole, list[str]] = field(default_factory=dict)
    missing_in_narrow: set[str] = field(default_factory=set)
    missing_in_medium: set[str] = field(default_factory=set)
    identical_classes: dict[str, set[str]] = field(default_factory=dict)
    class_conflicts: dict[str, list[ClassConflict]] = field(default_factory=dict)
    dropped_classes: dict[str, list[DroppedClass]] = field(default_factory=dict)

    # Fields available before any pass runs
    BASE_FIELDS = frozenset({"trees", "widths", "config"})

    @property
    def wide_tree(self) -> ComponentTree:
        return self.trees[BreakpointRole.WIDE]

    @property
    def medium_tree(self) -> ComponentTree:
        return self.trees[BreakpointRole.MEDIUM]

    @property
    def narrow_tree(self) -> ComponentTree:
        return self.trees[BreakpointRole.NARROW]

    @property
    def prefixes(self) -> BreakpointPrefixes:
        return BreakpointPrefixes(
            medium=self.config.medium_prefix,
            wide=self.config.wide_prefix,
            separator=self.config.prefix_separator,
        )

    def generate(self) -> str:
        """Source text of the merged (wide) tree."""
        return self.wide_tree.generate()
