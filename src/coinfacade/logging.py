from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = "coinfacade.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# request logs from aiohttp carry signed query strings
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client")


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("COINFACADE_LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _file_handler(log_dir: Path, formatter: logging.Formatter, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / LOG_FILE,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(log_dir: str | Path | None = None, level: str | None = None) -> int:
    """Install console logging and, when log_dir is given, a rotating log file.

    The level comes from `level`, then COINFACADE_LOG_LEVEL, then INFO.
    Returns the resolved numeric level.
    """
    resolved = _resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(resolved)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(resolved)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_dir:
        root.addHandler(_file_handler(Path(log_dir), formatter, resolved))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    return resolved
