"""
Logger factory for beltline modules.

Engine modules only create named loggers and emit records; attaching
handlers and choosing formats is left to whatever application embeds the
engine. The level of every beltline logger comes from ``BELTLINE_LOG_LEVEL``
(default INFO; unknown names fall back to INFO).
"""

from __future__ import annotations

import logging
import os
from typing import Final

LOG_LEVEL_ENV: Final[str] = "BELTLINE_LOG_LEVEL"

_LEVEL: Final[int] = getattr(
    logging, os.getenv(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO
)


def get_logger(name: str) -> logging.Logger:
    """Named logger set to the beltline level; handlers are left untouched."""
    logger = logging.getLogger(name)
    logger.setLevel(_LEVEL)
    return logger
