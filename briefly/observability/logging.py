"""Module loggers sharing one root stream handler."""

from __future__ import annotations

import logging

from briefly.infrastructure.settings import LOG_LEVEL

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, configuring the root logger on first use."""
    global _configured
    if not _configured:
        logging.basicConfig(
            level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        _configured = True
    return logging.getLogger(name)
