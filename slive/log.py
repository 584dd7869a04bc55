"""
log.py: Logging setup for entry points.

Modules only create their own logger with ``logging.getLogger(__name__)``;
levels and handlers are decided here, by whoever runs the driver.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level=logging.INFO, quiet=(), stream=None):
    """
    Install a single stream handler on the root logger at ``level``.
    Loggers named in ``quiet`` are raised to WARNING.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root
