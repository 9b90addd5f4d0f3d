import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "CRAFTSAVE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(name: Optional[str], default_level: int = logging.INFO) -> int:
    if not name:
        return default_level
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default_level


def configure_logging(level_name: Optional[str] = None, debug: bool = False) -> int:
    """Configure the root logger for command line use and return the chosen level.

    Precedence: ``debug`` flag, then CRAFTSAVE_LOG_LEVEL, then ``level_name``
    (normally taken from settings).
    """
    if debug:
        level = logging.DEBUG
    else:
        level = resolve_level(os.getenv(LOG_LEVEL_ENV), resolve_level(level_name))
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
