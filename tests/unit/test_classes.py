"""Tests for class-list diffing, conflict groups and the mobile-first merge."""

from __future__ import annotations

import pytest

from responsive_merger.pipeline.classes import (
    BreakpointPrefixes,
    DroppedClass,
    Tier,
    class_similarity,
    conflict_group,
    detect_conflicts,
    detect_display,
    diff_class_names,
    merge_class_lists,
    sort_responsive_classes,
)


class TestDiffClassNames:
    """Tests for diff_class_names."""

    def test_added_removed_unchanged(self):
        """Test the three partitions of a diff."""
        diff = diff_class_names("flex gap-2 p-4", "flex gap-4 p-4")

        assert diff.added == {"gap-4"}
        assert diff.removed == {"gap-2"}
        assert diff.unchanged == {"flex", "p-4"}
        assert not diff.is_empty

    def test_diff_with_itself_is_empty(self):
        """Test diffing a list against itself yields no change."""
        diff = diff_class_names("flex  gap-4 flex", "gap-4 flex")

        assert diff.is_empty
        assert diff.unchanged == {"flex", "gap-4"}

    def test_none_is_empty_list(self):
        """Test a missing class attribute behaves like an empty list."""
        diff = diff_class_names(None, "hidden")

        assert diff.added == {"hidden"}
        assert diff.removed == frozenset()


class TestConflictGroups:
    """Tests for static and parametric conflict groups."""

    @pytest.mark.parametrize(
        "class_name,group",
        [
            ("flex-col", "flexDirection"),
            ("justify-between", "justifyContent"),
            ("hidden", "display"),
            ("gap-4", "gap"),
            ("gap-x-2", "gapX"),
            ("max-w-custom-360", "maxWidth"),
            ("grow", "grow"),
            ("shrink-0", "shrink"),
            ("text-sm", None),
        ],
    )
    def test_conflict_group(self, class_name, group):
        """Test which group a class belongs to."""
        assert conflict_group(class_name) == group

    def test_detect_conflicts_reports_changed_groups(self):
        """Test a direction change and a gap change are both detected."""
        conflicts = detect_conflicts(
            ["flex", "flex-col", "gap-2"],
            ["flex", "flex-row", "gap-4"],
            ["flex", "flex-row", "gap-4"],
        )
        by_group = {c.group: c for c in conflicts}

        assert set(by_group) == {"flexDirection", "gap"}
        assert by_group["flexDirection"].narrow == ("flex-col",)
        assert by_group["flexDirection"].wide == ("flex-row",)
        assert by_group["gap"].to_dict()["medium"] == ["gap-4"]

    def test_identical_lists_have_no_conflicts(self):
        """Test identical class lists produce no conflicts."""
        assert detect_conflicts(["flex", "p-4"], ["flex", "p-4"], ["flex", "p-4"]) == []


class TestClassSimilarity:
    """Tests for class_similarity."""

    def test_empty_lists_are_identical(self):
        """Test two empty lists are fully similar."""
        assert class_similarity("", None) == 1.0

    def test_one_empty_list(self):
        """Test an empty list is dissimilar to a non-empty one."""
        assert class_similarity("flex", "") == 0.0

    def test_dimensional_classes_are_ignored_for_core_similarity(self):
        """Test elements differing only in sizes still match."""
        assert class_similarity("flex items-center w-full p-4", "flex items-center w-auto p-2") == 1.0

    def test_different_structure(self):
        """Test structurally different lists fall below the threshold."""
        assert class_similarity("flex items-center", "grid justify-end") < 0.8


class TestBreakpointPrefixes:
    """Tests for prefix application and splitting."""

    def test_apply_and_split(self):
        """Test prefixing is reversible."""
        prefixes = BreakpointPrefixes()

        assert prefixes.apply(Tier.BASE, "flex") == "flex"
        assert prefixes.apply(Tier.MEDIUM, "flex") == "md:flex"
        assert prefixes.split("lg:justify-between") == (Tier.WIDE, "justify-between")
        assert prefixes.split("hover:underline") == (Tier.BASE, "hover:underline")

    def test_custom_prefixes(self):
        """Test configured prefixes are used."""
        prefixes = BreakpointPrefixes(medium="tablet", wide="desktop")

        assert prefixes.apply(Tier.WIDE, "flex-row") == "desktop:flex-row"
        assert prefixes.at_tier(["tablet:gap-4", "gap-2"], Tier.MEDIUM) == ["gap-4"]

    def test_sort_order(self):
        """Test unprefixed classes come first, then medium, then wide."""
        result = sort_responsive_classes(
            ["lg:b", "md:z", "z", "a", "md:a", "lg:a"], BreakpointPrefixes()
        )

        assert result == ["a", "z", "md:a", "md:z", "lg:a", "lg:b"]


class TestMergeClassLists:
    """Tests for the mobile-first three-way merge."""

    def test_gap_example(self):
        """Test the narrow gap stays unprefixed and wider changes get prefixes."""
        conflicts = {c.group for c in detect_conflicts(
            ["flex", "gap-2"], ["flex", "gap-4"], ["flex", "gap-4", "justify-between"]
        )}
        result = merge_class_lists(
            "flex gap-2", "flex gap-4", "flex gap-4 justify-between",
            conflicting_groups=conflicts,
        )

        assert result.class_name == "flex gap-2 md:gap-4 lg:justify-between"
        assert result.dropped == []
        assert result.prefixed_count == 2

    def test_direction_change(self):
        """Test a column layout on narrow becomes a row from medium up."""
        result = merge_class_lists(
            "flex flex-col",
            "flex flex-row",
            "flex flex-row",
            conflicting_groups={"flexDirection"},
        )

        assert result.classes == ["flex", "flex-col", "md:flex-row"]

    def test_removed_class_without_replacement_is_dropped(self):
        """Test a narrow-only constraint is removed and reported."""
        result = merge_class_lists(
            "w-full max-w-custom-360", "w-full", "w-full", conflicting_groups={"maxWidth"}
        )

        assert result.classes == ["w-full"]
        assert result.dropped == [DroppedClass("max-w-custom-360", Tier.BASE, Tier.MEDIUM)]

    def test_medium_only_class_removed_at_wide(self):
        """Test a class only medium adds is dropped again for wide."""
        result = merge_class_lists("flex", "flex underline", "flex")

        assert result.classes == ["flex"]
        assert result.dropped == [DroppedClass("underline", Tier.MEDIUM, Tier.WIDE)]

    def test_identical_lists_unchanged(self):
        """Test identical lists merge to themselves."""
        result = merge_class_lists("p-4 flex", "flex p-4", "flex p-4")

        assert result.class_name == "flex p-4"
        assert result.dropped == []

    def test_merge_is_deterministic(self):
        """Test equal inputs in different token order give equal outputs."""
        first = merge_class_lists("a b c", "b c d", "c d e")
        second = merge_class_lists("c b a", "d c b", "e d c")

        assert first.classes == second.classes


class TestDetectDisplay:
    """Tests for detect_display."""

    def test_flex(self):
        """Test the element's own display class is used."""
        assert detect_display(["flex", "gap-2"]) == "flex"

    def test_prefixed_display_is_ignored(self):
        """Test only unconditional classes decide the display value."""
        assert detect_display(["md:grid", "p-4"]) == "block"
