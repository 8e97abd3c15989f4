# idphoto/logging.py
from __future__ import annotations
import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"

_configured = False


def configure(level: str | int | None = None) -> None:
    """
    Install the basic console handler once.
    Level comes from the argument, then IDPHOTO_LOG_LEVEL, then INFO.
    """
    global _configured
    if level is None:
        level = os.environ.get("IDPHOTO_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if not _configured:
        logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT)
        _configured = True
    logging.getLogger("idphoto").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure()
    if not name.startswith("idphoto"):
        name = f"idphoto.{name}"
    return logging.getLogger(name)
