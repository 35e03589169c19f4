"""Merge three breakpoint stylesheets into one desktop-first stylesheet.

The wide stylesheet is the unconditional base. Rules that change at the
medium width go in a ``max-width`` block for the medium breakpoint, rules
that change again at the narrow width go in a second block after it, so
narrower overrides win by source order.
"""

import logging

from ..breakpoints.loader import BreakpointWidths
from ..config import MergerConfig
from .sections import StylesheetSections

logger = logging.getLogger(__name__)


def merge_root_variables(sections: list[StylesheetSections]) -> str:
    """Union of the custom properties, later stylesheets overwriting earlier ones."""
    variables: dict[str, str] = {}
    for section in sections:
        variables.update(section.root_variables)
    if not variables:
        return ""
    lines = [f"  {name}: {value};" for name, value in variables.items()]
    return ":root {\n" + "\n".join(lines) + "\n}"


def changed_rules(base: dict[str, str], target: dict[str, str]) -> list[str]:
    """Rules of ``target`` that are new or whose text differs from ``base``."""
    return [rule for name, rule in target.items() if base.get(name) != rule]


def indent_css(css: str, indent: str = "  ") -> str:
    return "\n".join(indent + line if line else line for line in css.split("\n"))


def _media_block(title: str, width: int, rules: list[str]) -> str:
    body = indent_css("\n".join(rules))
    return (
        f"/* ========== {title} (<={width}px) ========== */\n"
        f"@media (max-width: {width}px) {{\n{body}\n}}"
    )


def merge_css(
    wide: str,
    medium: str,
    narrow: str,
    widths: BreakpointWidths,
    name: str,
    config: MergerConfig | None = None,
) -> str:
    """Merge the wide, medium and narrow stylesheets of one component.

    Args:
        wide: Stylesheet exported at the wide breakpoint.
        medium: Stylesheet exported at the medium breakpoint.
        narrow: Stylesheet exported at the narrow breakpoint.
        widths: Breakpoint widths used for the media queries.
        name: Component name for the header comment.
        config: Supplies the section marker patterns.

    Returns:
        The merged stylesheet, ending with a newline.
    """
    config = config or MergerConfig()

    def parse(css: str) -> StylesheetSections:
        return StylesheetSections.parse(
            css, config.utility_section_pattern, config.custom_section_pattern
        )

    wide_sections, medium_sections, narrow_sections = parse(wide), parse(medium), parse(narrow)
    wide_rules = wide_sections.custom_class_rules()
    medium_rules = medium_sections.custom_class_rules()
    narrow_rules = narrow_sections.custom_class_rules()

    parts = [
        f"/* Auto-generated responsive CSS for {name} */\n"
        f"/* Breakpoints: Desktop {widths.wide}px | Tablet {widths.medium}px "
        f"| Mobile {widths.narrow}px */"
    ]
    if wide_sections.imports:
        parts.append(wide_sections.imports)

    root = merge_root_variables([wide_sections, medium_sections, narrow_sections])
    if root:
        parts.append(root)
    if wide_sections.utilities:
        parts.append(wide_sections.utilities)
    if wide_sections.custom_classes:
        parts.append(
            f"/* ========== Desktop Styles ({widths.wide}px) ========== */\n"
            f"{wide_sections.custom_classes}"
        )

    medium_overrides = changed_rules(wide_rules, medium_rules)
    if medium_overrides:
        parts.append(_media_block("Tablet Overrides", widths.medium, medium_overrides))

    narrow_overrides = changed_rules(medium_rules, narrow_rules)
    if narrow_overrides:
        parts.append(_media_block("Mobile Overrides", widths.narrow, narrow_overrides))

    logger.debug(
        f"{name}: {len(wide_rules)} base rules, {len(medium_overrides)} medium "
        f"and {len(narrow_overrides)} narrow overrides"
    )
    return "\n\n".join(parts) + "\n"
