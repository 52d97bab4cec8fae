"""
Logging configuration for the Inventory API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called.  Request
lines written by the HTTP middleware go to the ``REQUEST_LOGGER``
logger, whose level is set independently so access logging can be
silenced with ``REQUEST_LOG_LEVEL=WARNING`` without hiding service
messages.  Uvicorn's own access log repeats the same lines and is
turned down to ``WARNING``.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

REQUEST_LOGGER = "inventory_api.requests"


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


def get_request_logger() -> logging.Logger:
    return logging.getLogger(REQUEST_LOGGER)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    request_level: Optional[str] = None,
) -> None:
    """Configure the root and request loggers.

    Parameters
    ----------
    level : str
        Level name for the root logger (e.g. ``"DEBUG"``).  Unknown
        names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file that receives a copy of every record.
    request_level : Optional[str]
        Level of the request logger; defaults to ``level``.
    """
    get_request_logger().setLevel(_level(request_level or level))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(_level(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
