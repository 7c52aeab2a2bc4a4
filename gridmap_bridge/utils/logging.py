"""
Centralized logging for the gridmap_bridge package.

Usage:
    from gridmap_bridge.utils.logging import get_logger
    logger = get_logger(__name__)

Environment variables:
    GRIDMAP_BRIDGE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from .. import config as C

_ROOT = "gridmap_bridge"

_LEVEL_NAMES = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _resolve_level(env_value: Optional[str]) -> int:
    if not env_value:
        return logging.INFO
    return _LEVEL_NAMES.get(env_value.strip().upper(), logging.INFO)


def _configure_root_once() -> None:
    root = logging.getLogger(_ROOT)
    if root.handlers:
        return
    level = _resolve_level(os.getenv(getattr(C, "LOG_LEVEL_ENV", "GRIDMAP_BRIDGE_LOG_LEVEL")))
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="%(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package root, configuring the root on first use."""
    _configure_root_once()
    pkg_logger = logging.getLogger(_ROOT)
    if not name or name == _ROOT:
        return pkg_logger
    if name.startswith(_ROOT + "."):
        name = name[len(_ROOT) + 1:]
    return pkg_logger.getChild(name)
