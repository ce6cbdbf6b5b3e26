"""
Logging setup for askprofiles.

- Logs to console (stderr) and to a rotating file under XDG state dir.
- Level: the CLI's --log-level, else ASKPROFILES_LOG_LEVEL, else INFO.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Tuple

from .platform import log_path


LOG_LEVEL_ENV = "ASKPROFILES_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_level(requested: Optional[str] = None) -> Tuple[str, int]:
    """Map a level name to (name, level); unknown names fall back to INFO."""
    name = (requested or os.environ.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
    level = getattr(logging, name, None)
    # logging also exposes non-level names such as BASIC_FORMAT
    if not isinstance(level, int):
        return "INFO", logging.INFO
    return name, level


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    level_name, numeric = resolve_level(level)

    log_file = log_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("askprofiles")
    logger.setLevel(numeric)
    logger.propagate = False

    # idempotent: repeated CLI invocations in one process reuse the logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter(LOG_FORMAT)
    handlers = (
        logging.StreamHandler(),
        RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"),
    )
    for h in handlers:
        h.setLevel(numeric)
        h.setFormatter(fmt)
        logger.addHandler(h)

    logger.debug("Logging to %s at level %s", log_file, level_name)
    return logger
