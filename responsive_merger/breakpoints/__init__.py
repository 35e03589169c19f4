"""Breakpoint exports: loading, component intersection and canonical order."""

from .components import ComponentSet, resolve_component_set
from .loader import (
    ROLES,
    BreakpointExport,
    BreakpointLoader,
    BreakpointRole,
    BreakpointSpec,
    BreakpointWidths,
    parse_width,
    validate_breakpoint_order,
)
from .ordering import normalize_component_name, order_from_layout, resolve_component_order

__all__ = [
    "ROLES",
    "BreakpointExport",
    "BreakpointLoader",
    "BreakpointRole",
    "BreakpointSpec",
    "BreakpointWidths",
    "ComponentSet",
    "normalize_component_name",
    "order_from_layout",
    "parse_width",
    "resolve_component_order",
    "resolve_component_set",
    "validate_breakpoint_order",
]
