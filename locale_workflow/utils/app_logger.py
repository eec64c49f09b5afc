"""
Process-wide logging setup for locale-workflow.

Modules log through `logging.getLogger(__name__)`; the host application
calls `configure_logging` once at startup (the workflow lifespan does).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Set the root log level and attach a stdout handler.

    Calling it again only changes the level; a handler installed by the
    host (or an earlier call) is left in place.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.root.setLevel(log_level)

    if logging.root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.root.addHandler(handler)
