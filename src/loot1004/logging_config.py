import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "LOOT1004_LOG_LEVEL"


def configure_logging(default_level: int = logging.INFO, debug_level: Optional[int] = None) -> int:
    """Set up logging for a host embedding the engine.

    The root logger gets ``default_level`` unless LOOT1004_LOG_LEVEL names a
    valid level. ``debug_level`` optionally sets the ``loot1004.debug`` logger
    used by LoggingDebugObserver independently of the rest.

    Returns the level applied to the root logger.
    """
    level = default_level
    level_name = os.getenv(LOG_LEVEL_ENV)
    if level_name:
        resolved = logging.getLevelName(level_name.upper())
        if isinstance(resolved, int):
            level = resolved
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
    if debug_level is not None:
        logging.getLogger("loot1004.debug").setLevel(debug_level)
    return level
