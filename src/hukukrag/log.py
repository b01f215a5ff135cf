"""Logging setup for the hukukrag CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, by the application, through a rich console handler.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "hukukrag"
_ENV_LEVEL = "HUKUKRAG_LOG_LEVEL"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a RichHandler (stderr) to the ``hukukrag`` logger.

    Level comes from *level*, else ``HUKUKRAG_LOG_LEVEL``, else WARNING.
    Calling it again only updates the level.
    """
    name = (level or os.environ.get(_ENV_LEVEL) or "WARNING").upper()
    resolved = getattr(logging, name, logging.WARNING)

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
