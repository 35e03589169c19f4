"""Correlation of elements across the three breakpoint trees.

Matching is layered. An element of the wide tree is paired with an element
of another tree by, in order:

1. ``data-node-id`` when the id is unique in both trees,
2. ``data-name`` when the name is unique in both trees and the tags agree,
3. its positional path (child indices below the nearest uniquely named
   ancestor) when the tags agree and the class lists are similar enough.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from ..analysis.elements import ComponentTree, Element
from .classes import class_similarity

logger = logging.getLogger(__name__)


class MatchStrategy(str, Enum):
    NODE_ID = "node-id"
    DATA_NAME = "data-name"
    POSITION = "position"


@dataclass
class ElementGroup:
    """The same element in the wide, medium and narrow trees."""

    key: str
    wide: Element
    medium: Element
    narrow: Element
    strategies: tuple[MatchStrategy, MatchStrategy]

    @property
    def matched_by_position(self) -> bool:
        return MatchStrategy.POSITION in self.strategies


@dataclass
class Correlation:
    groups: list[ElementGroup] = field(default_factory=list)
    unmatched_medium: list[str] = field(default_factory=list)
    unmatched_narrow: list[str] = field(default_factory=list)

    def count(self, strategy: MatchStrategy) -> int:
        return sum(1 for group in self.groups if strategy in group.strategies)


class _TreeIndex:
    """Lookup tables for one tree."""

    def __init__(self, tree: ComponentTree):
        self.tree = tree
        elements = tree.elements
        node_counts = Counter(el.node_id for el in elements if el.node_id)
        name_counts = Counter(el.data_name for el in elements if el.data_name)
        self.unique_node_ids = {k for k, v in node_counts.items() if v == 1}
        self.unique_names = {k for k, v in name_counts.items() if v == 1}
        self.by_node_id = {
            el.node_id: el for el in elements if el.node_id in self.unique_node_ids
        }
        self.by_name = {
            el.data_name: el for el in elements if el.data_name in self.unique_names
        }
        self.paths: dict[int, str] = {}
        for index, root in enumerate(tree.roots):
            self._index_paths(root, f"[{index}]")
        self.by_path = {self.paths[id(el)]: el for el in elements}

    def _index_paths(self, element: Element, path: str) -> None:
        self.paths[id(element)] = path
        anchor = (
            element.data_name if element.data_name in self.unique_names else path
        )
        for index, child in enumerate(element.children):
            self._index_paths(child, f"{anchor}>[{index}]")

    def path_of(self, element: Element) -> str:
        return self.paths[id(element)]

    def key_of(self, element: Element) -> str:
        """Stable group key: unique data-name, then unique node id, then path.

        Node ids are regenerated per export, so they only key a group when
        the element has no usable name.
        """
        if element.data_name in self.unique_names:
            return element.data_name
        if element.node_id in self.unique_node_ids:
            return f"id:{element.node_id}"
        return self.path_of(element)


class ElementMatcher:
    """Pairs every element of the wide tree with its medium and narrow twins."""

    def __init__(self, similarity_threshold: float = 0.8):
        self.similarity_threshold = similarity_threshold

    def correlate(
        self, wide: ComponentTree, medium: ComponentTree, narrow: ComponentTree
    ) -> Correlation:
        wide_index = _TreeIndex(wide)
        medium_index = _TreeIndex(medium)
        narrow_index = _TreeIndex(narrow)
        used_medium: set[int] = set()
        used_narrow: set[int] = set()
        correlation = Correlation()

        for element in wide.iter_elements():
            key = wide_index.key_of(element)
            medium_match = self._find(element, wide_index, medium_index, used_medium)
            narrow_match = self._find(element, wide_index, narrow_index, used_narrow)

            if medium_match is None:
                correlation.unmatched_medium.append(key)
            if narrow_match is None:
                correlation.unmatched_narrow.append(key)
            if medium_match is None or narrow_match is None:
                continue

            used_medium.add(id(medium_match[0]))
            used_narrow.add(id(narrow_match[0]))
            correlation.groups.append(
                ElementGroup(
                    key=key,
                    wide=element,
                    medium=medium_match[0],
                    narrow=narrow_match[0],
                    strategies=(medium_match[1], narrow_match[1]),
                )
            )

        logger.debug(
            f"Correlated {len(correlation.groups)} element groups "
            f"({len(correlation.unmatched_medium)} unmatched in medium, "
            f"{len(correlation.unmatched_narrow)} unmatched in narrow)"
        )
        return correlation

    def _find(
        self,
        element: Element,
        source: _TreeIndex,
        target: _TreeIndex,
        used: set[int],
    ) -> tuple[Element, MatchStrategy] | None:
        if element.node_id and element.node_id in source.unique_node_ids:
            candidate = target.by_node_id.get(element.node_id)
            if candidate is not None and id(candidate) not in used:
                return candidate, MatchStrategy.NODE_ID

        if element.data_name and element.data_name in source.unique_names:
            candidate = target.by_name.get(element.data_name)
            if (
                candidate is not None
                and candidate.tag == element.tag
                and id(candidate) not in used
            ):
                return candidate, MatchStrategy.DATA_NAME

        candidate = target.by_path.get(source.path_of(element))
        if (
            candidate is not None
            and candidate.tag == element.tag
            and id(candidate) not in used
            and class_similarity(element.class_name, candidate.class_name)
            >= self.similarity_threshold
        ):
            return candidate, MatchStrategy.POSITION

        return None
