"""Logger naming and base configuration for wikimerge."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_BASE = "wikimerge"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'wikimerge'."""
    if not name or name == _BASE:
        return logging.getLogger(_BASE)
    if name.startswith(f"{_BASE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_BASE}.{name}")


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Configure the base 'wikimerge' logger once and return it.

    Later calls only adjust the level, so the CLI can be invoked repeatedly
    in one process without stacking handlers.
    """
    base = logging.getLogger(_BASE)
    base.setLevel(level)
    if base.handlers:
        return base

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    base.addHandler(handler)
    return base
