"""
Monty Hall Simulator - Configuration & Logging

Settings come from the environment (optionally a local .env file):
    MONTY_TRIALS      default trial count for the CLI        (100)
    MONTY_SEED        integer seed for reproducible runs     (unset)
    MONTY_LOG_LEVEL   level for the "montyhall" loggers      (WARNING)
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

logger = logging.getLogger("montyhall.settings")


def _env_int(name: str, default):
    """Read an int from the environment, keeping `default` if unset or malformed."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default!r}")
        return default


def _env_log_level(name: str, default: str = "WARNING") -> str:
    """Read a log level name from the environment, keeping `default` if unknown."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Ignoring {name}={raw!r}: expected one of {list(LOG_LEVELS)}, using {default!r}")
        return default
    return level


class SimConfig:

    # --- Batch ---
    DEFAULT_TRIALS = _env_int("MONTY_TRIALS", 100)
    SEED = _env_int("MONTY_SEED", None)

    # --- Reporting ---
    TABLE_PRECISION = 2          # decimals in the printed proportion table
    JSON_PRECISION = 4           # decimals in to_dict() proportions

    # --- Logging ---
    LOG_LEVEL = _env_log_level("MONTY_LOG_LEVEL")


def configure_logging(level: str = None) -> logging.Logger:
    """Attach a stderr handler to the "montyhall" logger (once) and set its level."""
    root = logging.getLogger("montyhall")
    if not root.handlers:
        _h = logging.StreamHandler()
        _h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(_h)
    root.setLevel((level or SimConfig.LOG_LEVEL).upper())
    return root
