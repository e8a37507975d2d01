"""Logging configuration with console and rotating file handlers"""
import glob
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

KEEP_SESSION_LOGS = 5
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 10

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'

# Request lines go to the file only
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def _prune_session_logs(log_path: Path) -> None:
    """Delete all but the newest KEEP_SESSION_LOGS - 1 session logs for log_path"""
    pattern = str(log_path.parent / f"{log_path.stem}_*.log")
    for old_log in sorted(glob.glob(pattern), reverse=True)[KEEP_SESSION_LOGS - 1:]:
        try:
            Path(old_log).unlink()
        except OSError:
            pass


def setup_logging(log_file: str = "logs/search-tuner.log", console_level: int = logging.INFO, file_level: int = logging.DEBUG):
    """
    Route logs to the console (brief) and to a per-session file (detailed).

    Each call starts a new timestamped session file next to log_file, e.g.
    logs/search-tuner_20250101_120000.log. Older session files beyond
    KEEP_SESSION_LOGS are removed first; a session file rotates at 10MB.

    Args:
        log_file: Base path to log file (relative to working directory)
        console_level: Console logging level
        file_level: File logging level, DEBUG includes per-search timings

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _prune_session_logs(log_path)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log} ({logging.getLevelName(file_level)})"
    )

    return session_log
