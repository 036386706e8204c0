from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConsoleHandler(logging.StreamHandler):
    """The stream handler configure_logging installs; one per process."""


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one ConsoleHandler to the "mdcms" logger. Safe to call repeatedly."""
    logger = logging.getLogger("mdcms")
    logger.setLevel(level.upper())
    if not any(isinstance(h, ConsoleHandler) for h in logger.handlers):
        handler = ConsoleHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
