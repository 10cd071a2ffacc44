from __future__ import annotations

import logging
import os
from pathlib import Path

BASE_PATH = "/notes"

DEFAULT_DATA_DIR = "_tmp"
DEFAULT_PORT = 6060


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", DEFAULT_DATA_DIR))


def listen_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def listen_port() -> int:
    try:
        return int(os.getenv("PORT", str(DEFAULT_PORT)))
    except ValueError:
        return DEFAULT_PORT


def log_level() -> int:
    name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO
