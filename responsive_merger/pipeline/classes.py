"""Class-list operators: diffing, conflict groups, similarity and merging.

Classes are utility tokens (``flex``, ``gap-4``, ``md:flex-row``). A class
list is normalized before any comparison: split on whitespace, deduplicated
and treated as a set.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..analysis.elements import normalize_class_list

# Mutually exclusive class groups
CONFLICT_GROUPS: dict[str, tuple[str, ...]] = {
    "flexDirection": ("flex-row", "flex-col", "flex-row-reverse", "flex-col-reverse"),
    "alignItems": ("items-start", "items-center", "items-end", "items-baseline", "items-stretch"),
    "justifyContent": (
        "justify-start",
        "justify-center",
        "justify-end",
        "justify-between",
        "justify-around",
        "justify-evenly",
    ),
    "alignContent": (
        "content-start",
        "content-center",
        "content-end",
        "content-between",
        "content-around",
        "content-evenly",
        "content-stretch",
    ),
    "display": ("block", "inline-block", "inline", "flex", "inline-flex", "grid", "inline-grid", "hidden"),
    "position": ("static", "fixed", "absolute", "relative", "sticky"),
}

# Families of parametric classes, any two members override each other
DYNAMIC_CONFLICT_PATTERNS: dict[str, re.Pattern[str]] = {
    "width": re.compile(r"^w-"),
    "minWidth": re.compile(r"^min-w-"),
    "maxWidth": re.compile(r"^max-w-"),
    "height": re.compile(r"^h-"),
    "minHeight": re.compile(r"^min-h-"),
    "maxHeight": re.compile(r"^max-h-"),
    "basis": re.compile(r"^basis-"),
    "grow": re.compile(r"^grow(-|$)"),
    "shrink": re.compile(r"^shrink(-|$)"),
    "gap": re.compile(r"^gap-(?![xy]-)"),
    "gapX": re.compile(r"^gap-x-"),
    "gapY": re.compile(r"^gap-y-"),
    "padding": re.compile(r"^p-"),
    "paddingX": re.compile(r"^px-"),
    "paddingY": re.compile(r"^py-"),
    "paddingTop": re.compile(r"^pt-"),
    "paddingRight": re.compile(r"^pr-"),
    "paddingBottom": re.compile(r"^pb-"),
    "paddingLeft": re.compile(r"^pl-"),
    "margin": re.compile(r"^m-"),
    "marginX": re.compile(r"^mx-"),
    "marginY": re.compile(r"^my-"),
    "marginTop": re.compile(r"^mt-"),
    "marginRight": re.compile(r"^mr-"),
    "marginBottom": re.compile(r"^mb-"),
    "marginLeft": re.compile(r"^ml-"),
}

# Classes that typically differ between breakpoints for the same element
DIMENSIONAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^w-", r"^min-w-", r"^max-w-",
        r"^h-", r"^min-h-", r"^max-h-",
        r"^basis-", r"^grow$", r"^grow-", r"^shrink$", r"^shrink-",
        r"^gap-", r"^p-", r"^px-", r"^py-", r"^m-", r"^mx-", r"^my-",
    )
)

DISPLAY_CLASSES = CONFLICT_GROUPS["display"]


class Tier(int, Enum):
    """Where a class applies: unconditionally, from medium up, from wide up."""

    BASE = 0
    MEDIUM = 1
    WIDE = 2


@dataclass(frozen=True)
class ClassNameDiff:
    """Difference between a base class list and a target class list."""

    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()
    unchanged: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def diff_class_names(
    base: str | Iterable[str] | None, target: str | Iterable[str] | None
) -> ClassNameDiff:
    """Compute added/removed/unchanged classes going from ``base`` to ``target``."""
    base_set = set(normalize_class_list(base))
    target_set = set(normalize_class_list(target))
    return ClassNameDiff(
        added=frozenset(target_set - base_set),
        removed=frozenset(base_set - target_set),
        unchanged=frozenset(base_set & target_set),
    )


def conflict_group(class_name: str) -> str | None:
    """Name of the conflict group a class belongs to, if any."""
    for group, members in CONFLICT_GROUPS.items():
        if class_name in members:
            return group
    for group, pattern in DYNAMIC_CONFLICT_PATTERNS.items():
        if pattern.match(class_name):
            return group
    return None


def is_dimensional_class(class_name: str) -> bool:
    return any(pattern.match(class_name) for pattern in DIMENSIONAL_PATTERNS)


def class_similarity(first: str | Iterable[str] | None, second: str | Iterable[str] | None) -> float:
    """Similarity in [0, 1] between two class lists.

    The higher of the Jaccard index over all classes and over the
    non-dimensional ("core") classes, so that elements with the same
    structure but different sizes still match.
    """
    set1 = set(normalize_class_list(first))
    set2 = set(normalize_class_list(second))
    if not set1 and not set2:
        return 1.0
    if not set1 or not set2:
        return 0.0

    total = len(set1 & set2) / len(set1 | set2)

    core1 = {c for c in set1 if not is_dimensional_class(c)}
    core2 = {c for c in set2 if not is_dimensional_class(c)}
    core_union = core1 | core2
    if not core_union:
        return total
    core = len(core1 & core2) / len(core_union)
    return max(total, core)


@dataclass(frozen=True)
class ClassConflict:
    """Classes of one conflict group that differ across the breakpoints."""

    group: str
    narrow: tuple[str, ...]
    medium: tuple[str, ...]
    wide: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "group": self.group,
            "narrow": list(self.narrow),
            "medium": list(self.medium),
            "wide": list(self.wide),
        }


def detect_conflicts(
    narrow: Iterable[str], medium: Iterable[str], wide: Iterable[str]
) -> list[ClassConflict]:
    """Conflict groups whose members differ between the three class lists."""
    lists = [normalize_class_list(narrow), normalize_class_list(medium), normalize_class_list(wide)]
    conflicts: list[ClassConflict] = []

    for group, members in CONFLICT_GROUPS.items():
        matches = [tuple(c for c in classes if c in members)[:1] for classes in lists]
        if any(matches) and len(set(matches)) > 1:
            conflicts.append(ClassConflict(group, *matches))

    for group, pattern in DYNAMIC_CONFLICT_PATTERNS.items():
        matches = [tuple(c for c in classes if pattern.match(c)) for classes in lists]
        if any(matches) and len(set(matches)) > 1:
            conflicts.append(ClassConflict(group, *matches))

    return conflicts


@dataclass(frozen=True)
class BreakpointPrefixes:
    """Prefixes that make a class conditional on the medium or wide breakpoint."""

    medium: str = "md"
    wide: str = "lg"
    separator: str = ":"

    def apply(self, tier: Tier, class_name: str) -> str:
        if tier is Tier.BASE:
            return class_name
        prefix = self.medium if tier is Tier.MEDIUM else self.wide
        return f"{prefix}{self.separator}{class_name}"

    def split(self, token: str) -> tuple[Tier, str]:
        """Split a token into its tier and unprefixed class."""
        for tier, prefix in ((Tier.MEDIUM, self.medium), (Tier.WIDE, self.wide)):
            marker = f"{prefix}{self.separator}"
            if token.startswith(marker):
                return tier, token[len(marker):]
        return Tier.BASE, token

    def at_tier(self, classes: Iterable[str], tier: Tier) -> list[str]:
        """Unprefixed classes that apply at exactly ``tier``."""
        result = []
        for token in classes:
            token_tier, base = self.split(token)
            if token_tier is tier:
                result.append(base)
        return result


def sort_responsive_classes(classes: Iterable[str], prefixes: BreakpointPrefixes) -> list[str]:
    """Deterministic order: unprefixed, then medium, then wide, each lexical."""

    def key(token: str) -> tuple[int, str]:
        tier, base = prefixes.split(token)
        return (int(tier), base)

    return sorted(set(classes), key=key)


@dataclass(frozen=True)
class DroppedClass:
    """A class removed from the merged list because a wider breakpoint lacks it."""

    class_name: str
    origin: Tier
    removed_at: Tier


@dataclass
class ClassMergeResult:
    classes: list[str]
    dropped: list[DroppedClass] = field(default_factory=list)

    @property
    def class_name(self) -> str:
        return " ".join(self.classes)

    @property
    def prefixed_count(self) -> int:
        return sum(1 for c in self.classes if ":" in c)


def _has_replacement(
    class_name: str, added: Iterable[str], conflicting_groups: set[str]
) -> bool:
    group = conflict_group(class_name)
    if group is None or group not in conflicting_groups:
        return False
    return any(conflict_group(candidate) == group for candidate in added)


def merge_class_lists(
    narrow: str | Iterable[str] | None,
    medium: str | Iterable[str] | None,
    wide: str | Iterable[str] | None,
    prefixes: BreakpointPrefixes | None = None,
    conflicting_groups: set[str] | None = None,
) -> ClassMergeResult:
    """Mobile-first merge of three class lists into one conditional list.

    Narrow classes apply unconditionally. Classes a wider breakpoint adds
    get that breakpoint's prefix. Classes a wider breakpoint removes are
    deleted from the result, except when the wider breakpoint adds a class
    of the same conflict group (listed in ``conflicting_groups``) that
    overrides it anyway:

        >>> merge_class_lists("flex gap-2", "flex gap-4", "flex gap-4 justify-between",
        ...                   conflicting_groups={"gap", "justifyContent"}).class_name
        'flex gap-2 md:gap-4 lg:justify-between'
    """
    prefixes = prefixes or BreakpointPrefixes()
    groups = conflicting_groups or set()
    narrow_set = set(normalize_class_list(narrow))
    result = set(narrow_set)
    dropped: list[DroppedClass] = []

    to_medium = diff_class_names(narrow_set, medium)
    for class_name in sorted(to_medium.added):
        result.add(prefixes.apply(Tier.MEDIUM, class_name))
    for class_name in sorted(to_medium.removed):
        if _has_replacement(class_name, to_medium.added, groups):
            continue
        result.discard(class_name)
        dropped.append(DroppedClass(class_name, Tier.BASE, Tier.MEDIUM))

    to_wide = diff_class_names(medium, wide)
    for class_name in sorted(to_wide.added):
        result.add(prefixes.apply(Tier.WIDE, class_name))
    for class_name in sorted(to_wide.removed):
        if _has_replacement(class_name, to_wide.added, groups):
            continue
        medium_token = prefixes.apply(Tier.MEDIUM, class_name)
        if medium_token in result:
            result.discard(medium_token)
            dropped.append(DroppedClass(class_name, Tier.MEDIUM, Tier.WIDE))
        if class_name in result:
            result.discard(class_name)
            dropped.append(DroppedClass(class_name, Tier.BASE, Tier.WIDE))

    return ClassMergeResult(classes=sort_responsive_classes(result, prefixes), dropped=dropped)


def detect_display(classes: Iterable[str], prefixes: BreakpointPrefixes | None = None) -> str:
    """Display type implied by an element's unconditional classes."""
    prefixes = prefixes or BreakpointPrefixes()
    base = set(prefixes.at_tier(classes, Tier.BASE))
    for display in ("flex", "inline-flex", "grid", "inline-grid", "inline-block", "inline", "block"):
        if display in base:
            return display
    return "block"
