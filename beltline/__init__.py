"""beltline: conveyor configuration derivation and validation engine."""
from __future__ import annotations

from beltline.logging import get_logger

__version__ = "0.1.0"

log = get_logger(__name__)

__all__ = ["__version__", "get_logger", "log"]
