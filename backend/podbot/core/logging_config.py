"""
Logging setup for the Pod Countdown Bot.

Console output plus two daily-rotated files under the log directory:
- info.log: INFO and above
- error.log: ERROR and above

Files also rotate early once they reach LOG_MAX_BYTES (20 MB by default).
"""
import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from podbot.core.config import Settings, settings as default_settings


LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so repeated calls don't stack them
_HANDLER_FLAG = "_podbot_handler"


class SizedTimedRotatingFileHandler(TimedRotatingFileHandler):
    """
    Rotate at midnight, and also whenever the file would grow past max_bytes.

    Size rollovers within one day share the date suffix and get a numeric
    counter (info.log.2025-01-06, info.log.2025-01-06.1, ...).
    """

    def __init__(self, filename, max_bytes: int = 0, **kwargs):
        super().__init__(filename, **kwargs)
        self.max_bytes = max_bytes

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        if super().shouldRollover(record):
            return True
        if self.max_bytes <= 0:
            return False

        if self.stream is None:
            self.stream = self._open()
        message = f"{self.format(record)}\n"
        return self.stream.tell() + len(message.encode(self.encoding or "utf-8")) > self.max_bytes

    def rotation_filename(self, default_name: str) -> str:
        name = super().rotation_filename(default_name)
        if not os.path.exists(name):
            return name

        counter = 1
        while os.path.exists(f"{name}.{counter}"):
            counter += 1
        return f"{name}.{counter}"


def _rotating_handler(
    path: Path,
    level: int,
    retention_days: int,
    max_bytes: int = 0
) -> SizedTimedRotatingFileHandler:
    handler = SizedTimedRotatingFileHandler(
        path,
        max_bytes=max_bytes,
        when="midnight",
        backupCount=retention_days,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    return handler


def configure_logging(config: Optional[Settings] = None) -> logging.Logger:
    """
    Install console and rotating file handlers on the root logger.

    Safe to call more than once; earlier handlers from this function
    are replaced.

    Returns:
        The configured root logger
    """
    config = config or default_settings
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    handlers = [
        console_handler,
        _rotating_handler(log_dir / "info.log", logging.INFO, config.log_retention_days, config.log_max_bytes),
        _rotating_handler(log_dir / "error.log", logging.ERROR, config.log_retention_days, config.log_max_bytes),
    ]

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_FLAG, False):
            root.removeHandler(existing)
            existing.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        root.addHandler(handler)

    root.setLevel(level)
    return root
