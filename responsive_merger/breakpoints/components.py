"""Intersection of component names across the three breakpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..cli.errors import NoCommonComponentsError
from .loader import ROLES, BreakpointExport, BreakpointRole

logger = logging.getLogger(__name__)


@dataclass
class ComponentSet:
    """Components common to all breakpoints plus what is left out and why."""

    common: list[str]
    available: dict[BreakpointRole, list[str]] = field(default_factory=dict)

    def exclusive_to(self, role: BreakpointRole) -> list[str]:
        """Components found only in ``role``'s export."""
        others = set().union(*(set(self.available[r]) for r in ROLES if r != role))
        return [name for name in self.available[role] if name not in others]

    def missing_in(self, role: BreakpointRole) -> list[str]:
        """Components present in every other breakpoint but absent from ``role``."""
        others = [set(self.available[r]) for r in ROLES if r != role]
        present_elsewhere = set.intersection(*others)
        return sorted(present_elsewhere - set(self.available[role]))

    def counts(self) -> dict[str, int]:
        return {role.value: len(names) for role, names in self.available.items()}


def resolve_component_set(
    exports: dict[BreakpointRole, BreakpointExport],
) -> ComponentSet:
    """Intersect the ``.tsx`` component names of the three exports.

    Breakpoint-exclusive and missing components are logged as warnings.
    Raises NoCommonComponentsError when nothing is shared.
    """
    available = {role: exports[role].component_names() for role in ROLES}
    for role in ROLES:
        logger.info(f"{role.label}: {len(available[role])} components")

    narrow_names = set(available[BreakpointRole.NARROW])
    medium_names = set(available[BreakpointRole.MEDIUM])
    common = [
        name
        for name in available[BreakpointRole.WIDE]
        if name in medium_names and name in narrow_names
    ]
    component_set = ComponentSet(common=common, available=available)

    for role in ROLES:
        exclusive = component_set.exclusive_to(role)
        if exclusive:
            logger.warning(f"{role.label}-only: {', '.join(exclusive)}")
        missing = component_set.missing_in(role)
        if missing:
            logger.warning(f"Missing in {role.value}: {', '.join(missing)}")

    if not common:
        raise NoCommonComponentsError(component_set.counts())

    logger.info(f"Found {len(common)} common components")
    return component_set
