# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Centralised logging configuration.

Handlers, rotation and format live in  etc/logging.conf.  Where the log file
goes and how verbose the service is come from Settings (``LOG_DIR``,
``LOG_LEVEL``), so they can be changed per environment without editing the
config file.

Import the service logger, or a named child of it:
    from core.logger import logger
    from core.logger import get_logger;  log = get_logger("breach")

Secrets never reach the log: callers log record ids, hash prefixes and
counts only.
"""

import configparser as _cp
import logging
import logging.config
from pathlib import Path

from core.config import settings

ROOT_LOGGER = "pwvault"

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
# project root: backend/core/logger.py  →  ../../  →  project/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"
_LOG_DIR      = Path(settings.log_dir) if settings.log_dir else _PROJECT_ROOT / "log"
_LOG_FILE     = _LOG_DIR / "pwvault.log"


def _configure() -> None:
    _LOG_DIR.mkdir(parents=True, exist_ok=True)

    # logging.conf carries a %(log_file)s placeholder for the file handler.
    # RawConfigParser leaves the %(asctime)s style format strings alone.
    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    parser = _cp.RawConfigParser()
    parser.read_string(raw.replace("%(log_file)s", _LOG_FILE.as_posix()))
    logging.config.fileConfig(parser, disable_existing_loggers=False)

    logging.getLogger(ROOT_LOGGER).setLevel(settings.log_level.upper())


def get_logger(name: str = "") -> logging.Logger:
    """Child of the service logger, e.g. ``get_logger("breach")`` → pwvault.breach."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


_configure()

logger = get_logger()
