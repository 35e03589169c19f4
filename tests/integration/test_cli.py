"""Integration tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from responsive_merger import __version__
from responsive_merger.cli_full import cli


def _replace(args: list[str], flag: str, width: str, export_id: str) -> list[str]:
    index = args.index(flag)
    return args[: index + 1] + [width, export_id] + args[index + 3 :]


@pytest.mark.integration
class TestMergeCommand:
    """Tests for the merge command."""

    def test_successful_merge(self, merge_args, tmp_path):
        """Test a complete merge exits 0 and reports the summary."""
        result = CliRunner().invoke(cli, merge_args)

        assert result.exit_code == 0, result.output
        assert "[OK] 2 total | 2 successful" in result.output
        assert "Desktop:     [INFO] wide-1 (1440px)" in result.output
        assert (tmp_path / "out" / "Page.tsx").exists()

    def test_legacy_flag_aliases(self, exports_root, tmp_path):
        """Test the desktop, tablet and mobile aliases are accepted."""
        args = [
            "merge",
            "--desktop", "1440px", "wide-1",
            "--tablet", "960px", "medium-1",
            "--mobile", "420px", "narrow-1",
            "--exports-root", str(exports_root),
            "--output-dir", str(tmp_path / "aliased"),
            "--no-color",
            "--quiet",
        ]

        result = CliRunner().invoke(cli, args)

        assert result.exit_code == 0, result.output
        assert (tmp_path / "aliased" / "components" / "Header.tsx").exists()

    def test_workers_option(self, merge_args, tmp_path):
        """Test the worker count is passed to the merge."""
        result = CliRunner().invoke(cli, merge_args + ["--workers", "3", "--quiet"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "out" / "components" / "Footer.tsx").exists()

    def test_json_log_file(self, merge_args, tmp_path):
        """Test a JSON log file is written with component context."""
        log_file = tmp_path / "logs" / "merge.log"

        result = CliRunner().invoke(
            cli, merge_args + ["--log-file", str(log_file), "--log-format", "json", "--quiet"]
        )

        assert result.exit_code == 0, result.output
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert any(entry.get("component") == "Header" for entry in entries)

    def test_missing_breakpoint(self, merge_args):
        """Test omitting a breakpoint exits 1 with a suggestion."""
        index = merge_args.index("--narrow")
        args = merge_args[:index] + merge_args[index + 3 :]

        result = CliRunner().invoke(cli, args)

        assert result.exit_code == 1
        assert "Missing narrow breakpoint" in result.output
        assert "--narrow" in result.output

    def test_incomplete_breakpoint_flag(self):
        """Test a breakpoint flag missing its export id exits 1 with click's message."""
        result = CliRunner().invoke(cli, ["merge", "--wide", "1440"])

        assert result.exit_code == 1
        assert "requires 2 arguments" in result.output

    def test_unknown_option(self, merge_args):
        """Test an unrecognized option is a usage error that exits 1."""
        result = CliRunner().invoke(cli, merge_args + ["--bogus"])

        assert result.exit_code == 1
        assert "No such option" in result.output

    def test_invalid_width(self, merge_args):
        """Test a non-numeric width exits 1."""
        result = CliRunner().invoke(cli, _replace(merge_args, "--medium", "wide", "medium-1"))

        assert result.exit_code == 1
        assert "Invalid width: 'wide'" in result.output

    def test_wrong_order(self, merge_args, tmp_path):
        """Test widths that are not strictly decreasing exit 1 before any output."""
        result = CliRunner().invoke(cli, _replace(merge_args, "--wide", "900", "wide-1"))

        assert result.exit_code == 1
        assert "wide > medium > narrow" in result.output
        assert not (tmp_path / "out").exists()

    def test_missing_export(self, merge_args, tmp_path):
        """Test an unknown export id exits 1."""
        result = CliRunner().invoke(cli, _replace(merge_args, "--wide", "1440", "missing"))

        assert result.exit_code == 1
        assert "Export directory not found" in result.output
        assert not (tmp_path / "out").exists()

    def test_no_common_components(self, merge_args, exports_root):
        """Test exports without shared components exit 1."""
        for path in (exports_root / "narrow-1" / "components").glob("*.tsx"):
            path.unlink()

        result = CliRunner().invoke(cli, merge_args)

        assert result.exit_code == 1
        assert "No common components" in result.output

    def test_component_failure_still_exits_zero(self, merge_args, exports_root):
        """Test a per-component failure is reported without failing the run."""
        (exports_root / "wide-1" / "components" / "Footer.tsx").write_text("export default (")

        result = CliRunner().invoke(cli, merge_args)

        assert result.exit_code == 0, result.output
        assert "[FAIL] Footer:" in result.output
        assert "1 failed" in result.output

    def test_invalid_config_file(self, merge_args, tmp_path):
        """Test an invalid configuration file exits 1."""
        config_file = tmp_path / "merger.json"
        config_file.write_text(json.dumps({"utility_media_feature": "orientation"}))

        result = CliRunner().invoke(cli, merge_args + ["--config", str(config_file)])

        assert result.exit_code == 1
        assert "Invalid merge configuration" in result.output


class TestOtherCommands:
    """Tests for the passes command and version option."""

    def test_passes(self):
        """Test passes are listed in priority order."""
        result = CliRunner().invoke(cli, ["passes", "--no-color"])

        assert result.exit_code == 0
        output = result.output
        assert output.index("correlate-elements") < output.index("merge-classes")
        assert output.index("merge-classes") < output.index("inject-visibility-classes")

    def test_passes_marks_disabled(self, tmp_path):
        """Test disabled passes are shown as skipped."""
        config_file = tmp_path / "merger.json"
        config_file.write_text(json.dumps({"disabled_passes": ["inject-visibility-classes"]}))

        result = CliRunner().invoke(cli, ["passes", "--no-color", "--config", str(config_file)])

        assert result.exit_code == 0
        assert "[SKIP] inject-visibility-classes" in result.output

    def test_version(self):
        """Test the version option."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
