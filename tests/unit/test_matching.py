"""Tests for element correlation across breakpoint trees."""

from __future__ import annotations

from responsive_merger.pipeline.matching import ElementMatcher, MatchStrategy


def _wrap(body: str) -> str:
    return f"export default function C() {{\n  return (\n{body}\n  );\n}}\n"


class TestElementMatcher:
    """Tests for ElementMatcher.correlate."""

    def test_match_by_data_name(self, parser, header_sources):
        """Test uniquely named elements pair up by data-name."""
        wide, medium, narrow = (parser.parse_component(s) for s in header_sources)

        correlation = ElementMatcher().correlate(wide, medium, narrow)
        keys = [group.key for group in correlation.groups]

        assert keys == ["header", "Logo", "Nav", "Link"]
        assert correlation.unmatched_narrow == ["Search"]
        assert correlation.unmatched_medium == []
        assert correlation.count(MatchStrategy.DATA_NAME) == 4

    def test_node_id_takes_precedence(self, parser):
        """Test a shared node id matches even when the names differ."""
        wide = parser.parse_component(_wrap('<div data-node-id="7:1" data-name="Card" />'))
        medium = parser.parse_component(_wrap('<div data-node-id="7:1" data-name="Card 2" />'))
        narrow = parser.parse_component(_wrap('<div data-node-id="7:1" data-name="Tile" />'))

        correlation = ElementMatcher().correlate(wide, medium, narrow)

        assert len(correlation.groups) == 1
        assert correlation.groups[0].strategies == (MatchStrategy.NODE_ID, MatchStrategy.NODE_ID)
        assert correlation.groups[0].key == "Card"

    def test_key_prefers_data_name_over_node_id(self, parser):
        """Test groups are keyed by data-name even when node ids differ per export."""
        wide = parser.parse_component(_wrap('<div data-node-id="1:2" data-name="header" />'))
        medium = parser.parse_component(_wrap('<div data-node-id="3:2" data-name="header" />'))
        narrow = parser.parse_component(_wrap('<div data-node-id="5:2" data-name="header" />'))

        correlation = ElementMatcher().correlate(wide, medium, narrow)

        assert correlation.groups[0].key == "header"
        assert correlation.groups[0].strategies == (
            MatchStrategy.DATA_NAME,
            MatchStrategy.DATA_NAME,
        )

    def test_unnamed_element_keyed_by_node_id(self, parser):
        """Test an element without a data-name falls back to its node id key."""
        wide = parser.parse_component(_wrap('<div data-node-id="7:1" className="flex" />'))
        medium = parser.parse_component(_wrap('<div data-node-id="7:1" className="flex" />'))
        narrow = parser.parse_component(_wrap('<div data-node-id="7:1" className="flex" />'))

        correlation = ElementMatcher().correlate(wide, medium, narrow)

        assert correlation.groups[0].key == "id:7:1"

    def test_match_by_position(self, parser):
        """Test unnamed children match by path below a named ancestor."""
        wide = parser.parse_component(
            _wrap('<div data-name="List"><p className="flex items-center w-full" /></div>')
        )
        medium = parser.parse_component(
            _wrap('<div data-name="List"><p className="flex items-center w-auto" /></div>')
        )
        narrow = parser.parse_component(
            _wrap('<div data-name="List"><p className="flex items-center" /></div>')
        )

        correlation = ElementMatcher().correlate(wide, medium, narrow)
        child = correlation.groups[1]

        assert child.key == "List>[0]"
        assert child.matched_by_position
        assert correlation.count(MatchStrategy.POSITION) == 1

    def test_position_requires_similar_classes(self, parser):
        """Test positional candidates below the similarity threshold are rejected."""
        wide = parser.parse_component(_wrap('<div data-name="List"><p className="flex" /></div>'))
        medium = parser.parse_component(_wrap('<div data-name="List"><p className="grid" /></div>'))
        narrow = parser.parse_component(_wrap('<div data-name="List"><p className="flex" /></div>'))

        correlation = ElementMatcher().correlate(wide, medium, narrow)

        assert [g.key for g in correlation.groups] == ["List"]
        assert correlation.unmatched_medium == ["List>[0]"]

    def test_duplicate_names_fall_back_to_position(self, parser):
        """Test non-unique data-names are matched positionally."""
        body = '<div data-name="Row"><i data-name="Dot" /><i data-name="Dot" /></div>'
        trees = [parser.parse_component(_wrap(body)) for _ in range(3)]

        correlation = ElementMatcher().correlate(*trees)

        assert [g.key for g in correlation.groups] == ["Row", "Row>[0]", "Row>[1]"]
        assert correlation.groups[2].wide is trees[0].elements[2]
        assert correlation.groups[2].narrow is trees[2].elements[2]

    def test_tag_mismatch_is_not_matched(self, parser):
        """Test the same name on a different tag does not match."""
        wide = parser.parse_component(_wrap('<section data-name="Hero" />'))
        medium = parser.parse_component(_wrap('<section data-name="Hero" />'))
        narrow = parser.parse_component(_wrap('<div data-name="Hero" />'))

        correlation = ElementMatcher().correlate(wide, medium, narrow)

        assert correlation.groups == []
        assert correlation.unmatched_narrow == ["Hero"]
