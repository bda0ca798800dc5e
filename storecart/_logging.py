"""
Logging setup for applications embedding storecart.

Library modules only call ``logging.getLogger(__name__)``; handlers are the
application's business. ``configure_logging`` is the one-liner for scripts.
"""

from __future__ import annotations

import logging
import sys

from storecart.config import CartSettings, DEFAULT_SETTINGS

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_NAME = "storecart-stream"


def configure_logging(
    level: str | int | None = None,
    fmt: str = DEFAULT_FORMAT,
    *,
    settings: CartSettings | None = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the ``storecart`` logger.

    Without ``level`` the level comes from ``settings.log_level``
    (``STORECART_LOG_LEVEL`` when the settings were built by ``from_env``).
    """
    if level is None:
        level = (settings or DEFAULT_SETTINGS).log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger("storecart")
    root.setLevel(level)

    for handler in root.handlers[:]:
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    root.debug("logging configured at %s", logging.getLevelName(level))
    return root


__all__ = ("configure_logging", "DEFAULT_FORMAT")
