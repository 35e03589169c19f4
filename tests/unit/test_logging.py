"""Unit tests for logging and timing infrastructure."""

import json
import logging
from pathlib import Path

import pytest

from responsive_merger.merger_logging import JSONFormatter, get_logger, setup_logging
from responsive_merger.performance import PerformanceTimer, format_duration, timed


@pytest.fixture(autouse=True)
def reset_logger():
    """Restore the package logger after each test."""
    yield
    logger = get_logger()
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            "responsive_merger.merger", logging.INFO, __file__, 10, "Merged %s", ("Header",), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        """Test the standard fields are present."""
        entry = json.loads(JSONFormatter().format(self._record()))

        assert entry["message"] == "Merged Header"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "responsive_merger.merger"
        assert entry["line"] == 10
        assert "timestamp" in entry

    def test_extra_fields(self):
        """Test merge context fields are carried when set."""
        entry = json.loads(
            JSONFormatter().format(self._record(component="Header", pass_name="merge-classes"))
        )

        assert entry["component"] == "Header"
        assert entry["pass_name"] == "merge-classes"
        assert "duration_ms" not in entry


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_text_log_file(self, tmp_path: Path) -> None:
        """Test messages reach the log file in text format."""
        log_file = tmp_path / "logs" / "merge.log"
        logger = setup_logging(log_file=log_file)

        logger.info("Test message")

        content = log_file.read_text()
        assert "Test message" in content
        assert "| INFO" in content

    def test_json_log_file(self, tmp_path: Path) -> None:
        """Test JSON log format."""
        log_file = tmp_path / "merge.log"
        setup_logging(log_file=log_file, log_format="json")

        get_logger().info("JSON test message", extra={"component": "Footer"})

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "JSON test message"
        assert entry["component"] == "Footer"

    def test_file_captures_debug(self, tmp_path: Path) -> None:
        """Test the file handler records debug output regardless of console level."""
        log_file = tmp_path / "merge.log"
        setup_logging(log_file=log_file, quiet=True)

        get_logger().debug("detail")

        assert "detail" in log_file.read_text()

    @pytest.mark.parametrize(
        "kwargs,level",
        [({}, logging.INFO), ({"quiet": True}, logging.ERROR), ({"verbose": True}, logging.DEBUG)],
    )
    def test_console_level(self, kwargs, level) -> None:
        """Test quiet and verbose flags set the console level."""
        logger = setup_logging(**kwargs)

        console = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert [h.level for h in console] == [level]

    def test_child_loggers_share_handlers(self, tmp_path: Path) -> None:
        """Test module loggers propagate to the package logger."""
        log_file = tmp_path / "merge.log"
        setup_logging(log_file=log_file)

        logging.getLogger("responsive_merger.css.merger").warning("from module")

        assert "from module" in log_file.read_text()


class TestTiming:
    """Tests for timing helpers."""

    def test_format_duration(self):
        """Test durations are rounded to whole milliseconds."""
        assert format_duration(12.4) == "12ms"
        assert format_duration(0.2) == "0ms"

    def test_performance_timer(self):
        """Test the timer records a duration after the block."""
        with PerformanceTimer("merge-classes", auto_log=False) as timer:
            sum(range(100))

        assert timer.duration_ms >= 0
        assert timer.formatted.endswith("ms")

    def test_timed_passes_through(self):
        """Test the decorator returns the wrapped result and keeps the name."""

        @timed("double")
        def double(value: int) -> int:
            return value * 2

        assert double(4) == 8
        assert double.__name__ == "double"

    def test_timed_reraises(self):
        """Test exceptions from the wrapped function propagate."""

        @timed()
        def fail() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            fail()
