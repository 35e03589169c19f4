"""Stylesheet merging and utility-class compilation."""

from .merger import changed_rules, merge_css, merge_root_variables
from .sections import StylesheetSections, parse_class_rules
from .utility_compiler import (
    CSS_MAPPINGS,
    UtilityCompiler,
    UtilityRule,
    declaration_for,
    escape_selector,
)

__all__ = [
    "CSS_MAPPINGS",
    "StylesheetSections",
    "UtilityCompiler",
    "UtilityRule",
    "changed_rules",
    "declaration_for",
    "escape_selector",
    "merge_css",
    "merge_root_variables",
    "parse_class_rules",
]
