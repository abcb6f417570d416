"""Logging setup for processes that embed the silence client.

The library itself only creates module loggers; call ``configure_logging``
once from the host process if it does not configure logging on its own.
"""

import logging

from silencer.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{settings.log_level}'")

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    # httpx logs every request at INFO; keep it quiet unless debugging
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
