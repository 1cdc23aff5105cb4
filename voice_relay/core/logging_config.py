"""
Logging setup: console plus a daily file, one shared format.

Modules log through get_logger(__name__).
"""
import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every outbound call at INFO/DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "google", "grpc")

_configured = False


def setup_logging(log_level: str, log_dir: Path, app_name: str = "relay") -> logging.Logger:
    """
    Attach the console and file handlers to the root logger.

    Safe to call more than once; only the first call configures.
    The file handler records DEBUG regardless of log_level.
    """
    global _configured
    root = logging.getLogger()
    if _configured:
        return root

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name.lower()}_{datetime.now():%Y%m%d}.log"
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level.upper())
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    for handler in (console, file_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    root.debug(f"Logging configured: level={log_level}, file={log_file}")
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
