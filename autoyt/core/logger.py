"""
Logging configuration for autoyt.

This module sets up the logging system with multiple outputs:
    - Console: Compact, colored messages printed through the shared rich
      console so they never tear an active spinner
    - log_full_<timestamp>.log: Complete log of all events (DEBUG and above)
    - log_errors_<timestamp>.log: Only ERROR and CRITICAL level messages
    - uploads_<timestamp>.log: Videos published during the run

Log File Locations:
    All log files are created in <root>/logs, where root is the autoyt
    root directory from config.yaml. Each run gets its own files.

Usage:
    from autoyt.core.logger import setup_logging, get_logger

    setup_logging(config.paths.root)  # Call once at startup
    logger = get_logger(__name__)     # Get logger for each module

    logger.info("render: Artist - Song")
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import TextIO

from rich import get_console
from rich.markup import escape


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name using rich markup.

    Colors:
        - DEBUG: Blue
        - INFO: Cyan
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red

    INFO messages follow the "<step>: <subject>" convention ("render: ...",
    "undo: ...") and only the step is colored. The message itself is escaped
    so square brackets in titles are printed literally.
    """

    LEVEL_STYLES = {
        logging.DEBUG: "blue",
        logging.INFO: "bold cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bold red",
    }

    def format(self, record: logging.LogRecord) -> str:
        style = self.LEVEL_STYLES.get(record.levelno, "white")
        message = record.getMessage()
        if record.levelno == logging.INFO:
            step, sep, rest = message.partition(": ")
            if sep:
                return f"[{style}]{escape(step)}:[/{style}] {escape(rest)}"
            return escape(message)
        level = record.levelname.lower()
        return f"[{style}]{level}:[/{style}] {escape(message)}"


class RichConsoleHandler(logging.Handler):
    """
    Logging handler that prints through the shared rich console.

    The spinner in autoyt.core.progress draws on the same console, so log
    lines emitted while it spins are printed above it instead of being
    overwritten.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            get_console().print(msg, highlight=False, soft_wrap=True)
        except Exception:
            self.handleError(record)


class PublishedVideoHandler(logging.Handler):
    """
    Handler that writes published videos to the uploads report.

    Only records carrying a 'published_video_title' extra field are written,
    one block per video:

        Artist - Song
        https://youtu.be/abc123
        publish at: 2024-05-01 12:00 UTC

    Use log_video_published() to emit such records.
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "published_video_title"):
            return

        if self.report_file is None:
            return

        try:
            title = getattr(record, "published_video_title", "Unknown")
            video_id = getattr(record, "published_video_id", "")
            publish_at = getattr(record, "published_video_publish_at", None)

            self.report_file.write(f"{title}\n")
            self.report_file.write(f"https://youtu.be/{video_id}\n")
            if publish_at is not None:
                self.report_file.write(f"publish at: {publish_at:%Y-%m-%d %H:%M} UTC\n")
            else:
                self.report_file.write("publish at: immediately\n")
            self.report_file.write("\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(root_dir: Path, console_level: int = logging.INFO) -> Path:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any command runs.

    Args:
        root_dir: autoyt root directory. Logs go to root_dir/logs.
        console_level: Minimum level printed on the console.

    Returns:
        The logs directory.

    Behavior:
        1. Create root_dir/logs if it doesn't exist
        2. Configure root logger level to DEBUG, dropping existing handlers
        3. Console handler (RichConsoleHandler), compact colored format
        4. Full log file handler, DEBUG and above
        5. Error log file handler, ERROR and above
        6. Uploads report handler
    """
    logs_dir = root_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = RichConsoleHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(logs_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(logs_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    uploads_handler = PublishedVideoHandler(logs_dir / f"uploads_{timestamp}.log")
    uploads_handler.open()
    root_logger.addHandler(uploads_handler)

    # Google client libraries are chatty at DEBUG
    for noisy in ("googleapiclient.discovery_cache", "urllib3.connectionpool"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logs_dir


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        and produce no output.
    """
    return logging.getLogger(name)


def log_video_published(logger: logging.Logger, video) -> None:
    """
    Log a video that was uploaded, for the uploads report.

    Args:
        logger: The logger to use for the message.
        video: The published Video (title, upload_id and publish_at are used).
    """
    logger.info(
        f"upload: {video}",
        extra={
            "published_video_title": video.title,
            "published_video_id": video.upload_id,
            "published_video_publish_at": video.publish_at,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove every handler of the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
