"""Tests for logging setup."""

from click.testing import CliRunner
from loguru import logger

from tasktracker.cli import main
from tasktracker.core.log import setup_logging


def test_log_file_sink(tmp_path):
    """Test messages at or above the level reach the log file."""
    log_file = tmp_path / "logs" / "tracker.log"
    setup_logging("INFO", log_file)
    logger.debug("hidden")
    logger.info("visible")
    logger.remove()

    content = log_file.read_text()
    assert "visible" in content
    assert "hidden" not in content


def test_verbose_cli_logs_store_activity(tmp_path):
    """Test -v with --log-file records debug messages from commands."""
    log_file = tmp_path / "tracker.log"
    result = CliRunner().invoke(
        main,
        ["--db", str(tmp_path / "t.db"), "-v", "--log-file", str(log_file), "list"],
    )
    logger.remove()

    assert result.exit_code == 0, result.output
    assert "Opened session store" in log_file.read_text()
