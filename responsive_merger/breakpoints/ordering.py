"""Canonical render order of the common components.

The wide export's layout hierarchy (``metadata.xml``) lists the design
nodes in render order. Node names go through the identity map first
("title section" -> "Titlesection"), then through the word normalization
("account overview" -> "AccountOverview"). The first occurrence of each
common component fixes its position.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

logger = logging.getLogger(__name__)

LAYOUT_NODE_TAGS = frozenset({"frame", "instance", "node", "text"})

_WORD_SPLIT = re.compile(r"[\s_-]+")


def normalize_component_name(name: str) -> str:
    """Turn a design node name into a component name.

    Words are split on whitespace, underscores and hyphens, each word is
    capitalized and the rest lowercased:

        >>> normalize_component_name("title section")
        'TitleSection'
        >>> normalize_component_name("Account Overview")
        'AccountOverview'
    """
    return "".join(
        word[:1].upper() + word[1:].lower() for word in _WORD_SPLIT.split(name) if word
    )


def _walk_layout(node: ET.Element) -> list[str]:
    """Names of layout nodes in document order, root first."""
    names: list[str] = []
    if node.tag in LAYOUT_NODE_TAGS and node.get("name"):
        names.append(node.get("name", ""))
    for child in node:
        if child.tag in LAYOUT_NODE_TAGS:
            names.extend(_walk_layout(child))
    return names


def order_from_layout(
    layout_xml: str,
    components: list[str],
    identity_map: dict[str, str] | None = None,
) -> list[str]:
    """Order ``components`` by first appearance in a layout document.

    A layout name listed in ``identity_map`` resolves to its mapped
    component, any other name to its normalized form. Components never
    mentioned in the layout follow in lexical order.
    Raises ``xml.etree.ElementTree.ParseError`` on malformed XML.
    """
    root = ET.fromstring(layout_xml)
    wanted = set(components)
    identity_map = identity_map or {}
    ordered: list[str] = []
    for raw_name in _walk_layout(root):
        name = identity_map.get(raw_name) or normalize_component_name(raw_name)
        if name in wanted and name not in ordered:
            ordered.append(name)
    remaining = sorted(name for name in components if name not in ordered)
    return ordered + remaining


def resolve_component_order(
    layout_tree: Path | None,
    components: list[str],
    identity_map: dict[str, str] | None = None,
) -> list[str]:
    """Canonical order from the layout file, lexical order when unavailable."""
    if layout_tree is None or not layout_tree.exists():
        logger.warning("Layout file not found, using alphabetical component order")
        return sorted(components)

    try:
        order = order_from_layout(
            layout_tree.read_text(encoding="utf-8"), components, identity_map
        )
    except ET.ParseError as e:
        logger.warning(f"Failed to parse {layout_tree.name}, using alphabetical order: {e}")
        return sorted(components)

    logger.info("Component order: " + ", ".join(order))
    return order
