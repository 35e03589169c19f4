"""Compile breakpoint-prefixed utility classes into plain CSS.

The class merge introduces tokens such as ``md:flex-col`` or
``lg:basis-auto`` that no stylesheet defines. This compiler collects them,
maps the unprefixed class to declarations and wraps them in the media
query of their breakpoint.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..analysis.elements import ComponentTree
from ..analysis.tsx_parser import TreeParseError, TSXParser
from ..breakpoints.loader import BreakpointWidths
from ..config import MergerConfig
from ..pipeline.classes import BreakpointPrefixes, Tier

logger = logging.getLogger(__name__)

CSS_MAPPINGS: dict[str, str] = {
    # Flexbox
    "flex-col": "flex-direction: column;",
    "flex-row": "flex-direction: row;",
    "flex-col-reverse": "flex-direction: column-reverse;",
    "flex-row-reverse": "flex-direction: row-reverse;",
    "flex-wrap": "flex-wrap: wrap;",
    "flex-nowrap": "flex-wrap: nowrap;",
    # Flex sizing
    "basis-auto": "flex-basis: auto;",
    "basis-0": "flex-basis: 0;",
    "basis-full": "flex-basis: 100%;",
    "grow": "flex-grow: 1;",
    "grow-0": "flex-grow: 0;",
    "shrink": "flex-shrink: 1;",
    "shrink-0": "flex-shrink: 0;",
    "shrink-1": "flex-shrink: 1;",
    # Width
    "w-full": "width: 100%;",
    "w-auto": "width: auto;",
    "min-w-0": "min-width: 0;",
    "min-w-full": "min-width: 100%;",
    "max-w-full": "max-width: 100%;",
    "max-w-none": "max-width: none;",
    # Height
    "h-full": "height: 100%;",
    "h-auto": "height: auto;",
    "min-h-0": "min-height: 0;",
    "min-h-full": "min-height: 100%;",
    "min-h-px": "min-height: 1px;",
    "max-h-full": "max-height: 100%;",
    "max-h-none": "max-height: none;",
    # Display
    "block": "display: block;",
    "inline-block": "display: inline-block;",
    "inline": "display: inline;",
    "flex": "display: flex;",
    "inline-flex": "display: inline-flex;",
    "grid": "display: grid;",
    "inline-grid": "display: inline-grid;",
    "hidden": "display: none;",
    # Spacing
    "gap-0": "gap: 0;",
    "p-0": "padding: 0;",
    "m-0": "margin: 0;",
    # Alignment
    "justify-center": "justify-content: center;",
    "justify-between": "justify-content: space-between;",
    "justify-around": "justify-content: space-around;",
    "justify-evenly": "justify-content: space-evenly;",
    "justify-start": "justify-content: flex-start;",
    "justify-end": "justify-content: flex-end;",
    "items-center": "align-items: center;",
    "items-start": "align-items: flex-start;",
    "items-end": "align-items: flex-end;",
    "items-stretch": "align-items: stretch;",
    "items-baseline": "align-items: baseline;",
    # Overflow
    "overflow-x-auto": "overflow-x: auto;",
    "overflow-x-scroll": "overflow-x: scroll;",
    "overflow-x-hidden": "overflow-x: hidden;",
    "overflow-y-auto": "overflow-y: auto;",
    "overflow-y-scroll": "overflow-y: scroll;",
    "overflow-y-hidden": "overflow-y: hidden;",
    "overflow-auto": "overflow: auto;",
    "overflow-hidden": "overflow: hidden;",
}

CUSTOM_VALUE_PATTERN = re.compile(r"^(min-w|max-w|w|min-h|max-h|h|gap)-custom-(.+)$")
GAP_SCALE_PATTERN = re.compile(r"^gap-(\d+)$")
CUSTOM_PROPERTIES = {
    "min-w": "min-width",
    "max-w": "max-width",
    "w": "width",
    "min-h": "min-height",
    "max-h": "max-height",
    "h": "height",
    "gap": "gap",
}
# One spacing unit of the utility scale, in pixels
SPACING_UNIT_PX = 4

_SELECTOR_SPECIALS = re.compile(r"([:./\[\]%#()!,])")
_NATIVE_SELECTOR = re.compile(r"\.((?:\\.|[a-zA-Z0-9_-])+)\s*[{,:\s]")


def escape_selector(token: str) -> str:
    """Escape a class token for use in a CSS class selector."""
    return _SELECTOR_SPECIALS.sub(r"\\\1", token)


def declaration_for(class_name: str) -> str | None:
    """CSS declaration for an unprefixed utility class, if it is known."""
    if class_name in CSS_MAPPINGS:
        return CSS_MAPPINGS[class_name]

    custom = CUSTOM_VALUE_PATTERN.match(class_name)
    if custom:
        prop, value = custom.groups()
        return f"{CUSTOM_PROPERTIES[prop]}: {value.replace('dot', '.')}px;"

    gap = GAP_SCALE_PATTERN.match(class_name)
    if gap:
        return f"gap: {int(gap.group(1)) * SPACING_UNIT_PX}px;"

    return None


def native_class_selectors(css: str) -> set[str]:
    """Unescaped class names that a stylesheet already defines rules for."""
    return {
        re.sub(r"\\(.)", r"\1", match.group(1)) for match in _NATIVE_SELECTOR.finditer(css)
    }


@dataclass(frozen=True)
class UtilityRule:
    """One compiled rule: a prefixed token and its declaration."""

    tier: Tier
    token: str
    declaration: str

    def render(self, indent: str = "  ") -> str:
        return (
            f"{indent}.{escape_selector(self.token)} {{\n"
            f"{indent}  {self.declaration}\n"
            f"{indent}}}"
        )


class UtilityCompiler:
    """Turns prefixed utility tokens into media-query CSS.

    Example usage:
        compiler = UtilityCompiler(widths, config)
        css = compiler.compile(compiler.collect_tokens(trees))
    """

    HEADER = "/* Responsive utility classes (auto-generated) */"

    def __init__(self, widths: BreakpointWidths, config: MergerConfig | None = None):
        self.widths = widths
        self.config = config or MergerConfig()
        self.prefixes = BreakpointPrefixes(
            medium=self.config.medium_prefix,
            wide=self.config.wide_prefix,
            separator=self.config.prefix_separator,
        )
        self._parser: TSXParser | None = None

    @property
    def parser(self) -> TSXParser:
        if self._parser is None:
            self._parser = TSXParser()
        return self._parser

    def media_query(self, tier: Tier) -> str:
        width = self.widths.medium if tier is Tier.MEDIUM else self.widths.wide
        return f"@media ({self.config.utility_media_feature}: {width}px)"

    def tier_order(self) -> tuple[Tier, Tier]:
        """Emission order of the two blocks: the narrower query must win last."""
        if self.config.utility_media_feature == "max-width":
            return (Tier.WIDE, Tier.MEDIUM)
        return (Tier.MEDIUM, Tier.WIDE)

    def is_prefixed(self, token: str) -> bool:
        return self.prefixes.split(token)[0] is not Tier.BASE

    def collect_tokens(self, trees: Iterable[ComponentTree]) -> set[str]:
        """Prefixed class tokens used anywhere in the given trees."""
        tokens: set[str] = set()
        for tree in trees:
            tokens.update(t for t in tree.class_tokens() if self.is_prefixed(t))
        return tokens

    def tokens_in_source(self, source: str, name: str | None = None) -> set[str]:
        try:
            values = self.parser.class_literals(source)
        except TreeParseError as e:
            logger.warning(f"Skipping utility scan of {name or 'source'}: {e}")
            return set()
        return {t for value in values for t in value.split() if self.is_prefixed(t)}

    def rules_for(self, tokens: Iterable[str], existing_css: str = "") -> list[UtilityRule]:
        native = native_class_selectors(existing_css) if existing_css else set()
        rules = []
        for token in sorted(set(tokens)):
            tier, class_name = self.prefixes.split(token)
            if tier is Tier.BASE or token in native:
                continue
            declaration = declaration_for(class_name)
            if declaration is None:
                logger.debug(f"No CSS mapping for utility class {token}")
                continue
            rules.append(UtilityRule(tier, token, declaration))
        return rules

    def compile(self, tokens: Iterable[str], existing_css: str = "") -> str:
        """CSS for the given tokens, or an empty string when nothing maps.

        Tokens whose selector already has a rule in ``existing_css`` are
        skipped.
        """
        rules = self.rules_for(tokens, existing_css)
        if not rules:
            return ""

        blocks = [self.HEADER]
        for tier in self.tier_order():
            tier_rules = [rule for rule in rules if rule.tier is tier]
            if not tier_rules:
                continue
            body = "\n".join(rule.render() for rule in tier_rules)
            blocks.append(f"{self.media_query(tier)} {{\n{body}\n}}")
        return "\n\n".join(blocks) + "\n"

    def compile_per_component(self, components_dir: Path) -> int:
        """Append each component's utilities to its own stylesheet.

        Returns:
            Number of tokens compiled across all components.
        """
        compiled = 0
        for source_path in sorted(Path(components_dir).glob("*.tsx")):
            tokens = self.tokens_in_source(
                source_path.read_text(encoding="utf-8"), source_path.name
            )
            style_path = source_path.with_suffix(".css")
            existing = style_path.read_text(encoding="utf-8") if style_path.exists() else ""
            if self.HEADER in existing:
                existing = existing[: existing.index(self.HEADER)].rstrip() + "\n"
            css = self.compile(tokens, existing)
            if not css:
                continue
            style_path.write_text(f"{existing.rstrip()}\n\n{css}", encoding="utf-8")
            compiled += len(tokens)
            logger.debug(f"{source_path.stem}: {len(tokens)} utility classes compiled")
        return compiled
