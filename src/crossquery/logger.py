"""Debug logging for criteria and compilers.

The root logger is configured from `settings.LOG_LEVEL` the first time a
`Logger` is created; later instances reuse that configuration.
"""

import logging
from typing import Optional

from crossquery.settings import settings as api_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def resolve_level(name: Optional[str]) -> int:
    """Map a level name to its numeric level, INFO for unset or unknown names."""
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Level name, `settings.LOG_LEVEL` when omitted
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(level=resolve_level(level or api_settings.LOG_LEVEL), format=LOG_FORMAT)
    _configured = True


class Logger:
    """Named debug logger used by `Criteria` and `SearchRequestCompiler`."""

    def __init__(self, name: str) -> None:
        configure_logging()
        self._logger = logging.getLogger(f"crossquery.{name}")

    def debug(self, msg: str, *args) -> None:
        self._logger.debug(msg, *args)
