import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from core.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
NOISY_LOGGERS = ["boxsdk", "slack_sdk", "urllib3", "httpx"]


def configure_logging(level: str = None, log_dir: str = None):
    """Send logs to stdout and to a rotating file in the logging directory"""
    level = level or settings.LOG_LEVEL
    log_dir = log_dir or settings.LOGGING_DIR

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # configure_logging may run twice (reloader, tests)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / "relay.log", maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
