"""Integration tests for complete merge runs over three breakpoint exports."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from responsive_merger.breakpoints.loader import BreakpointRole, BreakpointSpec
from responsive_merger.cli.errors import ExportNotFoundError, NoCommonComponentsError
from responsive_merger.config import MergerConfig
from responsive_merger.merger import ResponsiveMerger

MERGED_HEADER_CLASSES = (
    'className="flex flex-col gap-4 max-w-custom-360 w-full md:flex-row md:max-w-none '
    'lg:justify-between"'
)


def _run(exports_root: Path, specs, output_dir: Path, config: MergerConfig | None = None):
    merger = ResponsiveMerger(
        specs, exports_root=exports_root, output_dir=output_dir, config=config
    )
    return merger.run()


def _generated_files(output_dir: Path) -> dict[str, str]:
    return {
        str(path.relative_to(output_dir)): path.read_text()
        for path in sorted(output_dir.rglob("*"))
        if path.suffix in {".tsx", ".css"}
    }


@pytest.mark.integration
class TestMergeFlow:
    """End-to-end merge over the fixture exports."""

    def test_output_layout(self, exports_root, specs, tmp_path):
        """Test every expected file is written."""
        output_dir = tmp_path / "out"
        report = _run(exports_root, specs, output_dir)

        assert report.success
        assert report.components == ["Header", "Footer"]
        assert sorted(_generated_files(output_dir)) == [
            "Page.css",
            "Page.tsx",
            "components/Footer.css",
            "components/Footer.tsx",
            "components/Header.css",
            "components/Header.tsx",
        ]
        assert (output_dir / "img" / "logo.svg").exists()
        assert (output_dir / "responsive-metadata.json").exists()

    def test_merged_component_source(self, exports_root, specs, tmp_path):
        """Test the merged Header carries mobile-first responsive classes."""
        output_dir = tmp_path / "out"
        _run(exports_root, specs, output_dir)

        header = (output_dir / "components" / "Header.tsx").read_text()
        assert MERGED_HEADER_CLASSES in header
        assert 'className="hidden md:block" data-name="Search"' in header
        assert 'className="shrink-0 md:shrink" data-name="Logo"' in header
        assert "export default function Header()" in header

    def test_helpers_injected(self, exports_root, specs, tmp_path):
        """Test the Footer receives the helpers it calls with their dependencies."""
        output_dir = tmp_path / "out"
        report = _run(exports_root, specs, output_dir)

        footer = (output_dir / "components" / "Footer.tsx").read_text()
        assert footer.index("function upper") < footer.index("function formatLabel")
        assert footer.index("function formatLabel") < footer.index("export default function Footer")
        results = {result.name: result for result in report.results}
        assert results["Footer"].helpers == ["upper", "formatLabel"]
        assert results["Header"].helpers == []

    def test_merged_component_stylesheet(self, exports_root, specs, tmp_path):
        """Test component stylesheets hold medium and narrow overrides."""
        output_dir = tmp_path / "out"
        _run(exports_root, specs, output_dir)

        css = (output_dir / "components" / "Header.css").read_text()
        assert css.startswith("/* Auto-generated responsive CSS for Header */")
        assert "@media (max-width: 960px) {\n  .title { font-size: 24px; }\n}" in css
        assert "--spacing: 8px;" in css

    def test_page_files(self, exports_root, specs, tmp_path):
        """Test the page imports components and compiles prefixed utilities."""
        output_dir = tmp_path / "out"
        report = _run(exports_root, specs, output_dir)

        page_source = (output_dir / "Page.tsx").read_text()
        page_css = (output_dir / "Page.css").read_text()
        assert not report.page.fallback
        assert "import Header from './components/Header';" in page_source
        assert "export default function Page() {" in page_source
        assert "@import './components/Header.css';" in page_css
        assert "@media (min-width: 960px) {" in page_css
        assert ".md\\:flex-row {\n    flex-direction: row;\n  }" in page_css
        assert ".lg\\:justify-between {" in page_css

    def test_metadata(self, exports_root, specs, tmp_path):
        """Test the merge report records breakpoints, order and statistics."""
        output_dir = tmp_path / "out"
        _run(exports_root, specs, output_dir)

        metadata = json.loads((output_dir / "responsive-metadata.json").read_text())
        assert metadata["type"] == "responsive-merge"
        assert metadata["mergeId"] == "out"
        assert metadata["components"] == ["Header", "Footer"]
        assert metadata["breakpoints"]["narrow"]["height"] == 0
        assert metadata["breakpoints"]["medium"]["height"] == 2600
        assert metadata["mergeStats"] == {"successCount": 2, "errorCount": 0, "totalComponents": 2}
        assert metadata["transformations"]["missingElements"] == ["Search"]
        header_stats = metadata["detailedStats"]["components"]["Header"]
        assert header_stats["merge-classes"]["executionTime"].endswith("ms")

    def test_deterministic_output(self, exports_root, specs, tmp_path):
        """Test two runs over the same inputs produce identical files."""
        _run(exports_root, specs, tmp_path / "first")
        _run(exports_root, specs, tmp_path / "second")

        assert _generated_files(tmp_path / "first") == _generated_files(tmp_path / "second")

    def test_parallel_matches_sequential(self, exports_root, specs, tmp_path):
        """Test the worker pool yields the same files in the same order."""
        sequential = _run(exports_root, specs, tmp_path / "sequential")
        parallel = _run(exports_root, specs, tmp_path / "parallel", MergerConfig(max_workers=4))

        assert [r.name for r in parallel.results] == [r.name for r in sequential.results]
        assert _generated_files(tmp_path / "parallel") == _generated_files(tmp_path / "sequential")

    def test_component_failure_is_recorded(self, exports_root, specs, tmp_path):
        """Test a component that fails to parse is reported and the run goes on."""
        (exports_root / "narrow-1" / "components" / "Header.tsx").write_text(
            "export default function ("
        )
        output_dir = tmp_path / "out"

        report = _run(exports_root, specs, output_dir)

        assert report.error_count == 1
        assert report.success_count == 1
        assert "Header" in report.errors
        assert not (output_dir / "components" / "Header.tsx").exists()
        assert (output_dir / "components" / "Footer.tsx").exists()
        metadata = json.loads((output_dir / "responsive-metadata.json").read_text())
        assert "error" in metadata["detailedStats"]["components"]["Header"]
        assert metadata["mergeStats"]["errorCount"] == 1

    def test_timestamped_output_dir(self, exports_root, specs, tmp_path):
        """Test output goes to a prefixed directory under the output root."""
        merger = ResponsiveMerger(
            specs, exports_root=exports_root, output_root=tmp_path / "screens"
        )

        report = merger.run()

        assert report.output_dir.parent == tmp_path / "screens"
        assert report.output_dir.name.startswith("responsive-merger-")

    def test_missing_images_are_skipped(self, exports_root, specs, tmp_path):
        """Test a wide export without images still merges."""
        for image in (exports_root / "wide-1" / "img").iterdir():
            image.unlink()
        (exports_root / "wide-1" / "img").rmdir()
        output_dir = tmp_path / "out"

        report = _run(exports_root, specs, output_dir)

        assert report.success
        assert not (output_dir / "img").exists()


@pytest.mark.integration
class TestMergeAborts:
    """Validation and structural errors stop the run before output."""

    def test_missing_export(self, exports_root, tmp_path):
        """Test an unknown export id aborts the run without output."""
        specs = [
            BreakpointSpec(BreakpointRole.WIDE, 1440, "wide-1"),
            BreakpointSpec(BreakpointRole.MEDIUM, 960, "medium-404"),
            BreakpointSpec(BreakpointRole.NARROW, 420, "narrow-1"),
        ]

        with pytest.raises(ExportNotFoundError):
            _run(exports_root, specs, tmp_path / "out")

        assert not (tmp_path / "out").exists()

    def test_no_common_components(self, exports_root, specs, tmp_path):
        """Test exports sharing nothing abort the run without output."""
        for path in (exports_root / "narrow-1" / "components").glob("*.tsx"):
            path.unlink()

        with pytest.raises(NoCommonComponentsError):
            _run(exports_root, specs, tmp_path / "out")

        assert not (tmp_path / "out").exists()

    def test_missing_spec(self, exports_root, specs):
        """Test all three breakpoints are required."""
        with pytest.raises(ValueError, match="narrow"):
            ResponsiveMerger(specs[:2], exports_root=exports_root)
