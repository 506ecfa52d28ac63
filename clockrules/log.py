"""Process logging setup."""

import logging
from pathlib import Path

DEFAULT_LOG_FILE = Path("clockrules.log")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_file: Path = DEFAULT_LOG_FILE, log_level: str = "WARNING") -> None:
    """
    Send logs to a file.

    The terminal belongs to the TUI, so nothing is logged to stdout or stderr.
    """
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
