"""
Logging setup.

Module loggers use logging.getLogger(__name__); this only configures the root.
"""

import logging
from typing import Optional

from stockbars.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once at startup."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
    # aiohttp access noise is not useful at INFO
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
