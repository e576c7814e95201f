"""
infrastructure.logging_config - Process-wide logging setup.

Modules only ever call logging.getLogger(__name__); this is the one place
that attaches a handler. Called by the composition root.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logging with a single stream handler.

    Safe to call repeatedly: later calls only adjust the level.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
