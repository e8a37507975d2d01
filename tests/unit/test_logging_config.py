"""Unit tests for logging setup and session log retention"""

import logging

import pytest

from search_tuner.logging_config import KEEP_SESSION_LOGS, setup_logging


@pytest.fixture
def restore_root_logger():
    """setup_logging replaces root handlers; put the originals back afterwards"""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestSetupLogging:
    def test_session_log_created(self, tmp_path, restore_root_logger):
        session_log = setup_logging(log_file=str(tmp_path / "logs" / "tuner.log"))

        logging.getLogger("search_tuner.test").debug("search timing")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert session_log.parent == tmp_path / "logs"
        assert session_log.name.startswith("tuner_")
        assert "search timing" in session_log.read_text(encoding="utf-8")

    def test_old_session_logs_pruned(self, tmp_path, restore_root_logger):
        """Test only the newest session logs survive a restart"""
        for day in range(1, 9):
            (tmp_path / f"tuner_2024010{day}_000000.log").write_text("old")

        session_log = setup_logging(log_file=str(tmp_path / "tuner.log"))

        remaining = sorted(p.name for p in tmp_path.glob("tuner_*.log"))
        assert len(remaining) == KEEP_SESSION_LOGS
        assert session_log.name in remaining
        assert "tuner_20240101_000000.log" not in remaining

    def test_handler_levels(self, tmp_path, restore_root_logger):
        setup_logging(log_file=str(tmp_path / "tuner.log"), console_level=logging.WARNING)

        levels = sorted(h.level for h in logging.getLogger().handlers)
        assert levels == [logging.DEBUG, logging.WARNING]
