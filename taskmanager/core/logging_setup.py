"""
Logging configuration.

Call setup_logging() once at startup, before the first log line.
"""

import logging
import sys

# Third-party loggers that are too chatty at INFO.
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "multipart")


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Install a single stream handler on the root logger.

    Args:
        level: Log level name or number for the application loggers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.captureWarnings(True)
