import os
import sys

from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False


def setup_logging(level=None, suppress_console=None, force=False):
    """
    Configures the global logger.

    Args:
        level: Logging level. If None, read NOSQLITE_LOG_LEVEL (default: WARNING).
        suppress_console: If True, suppress console logging. If None, check NOSQLITE_MACHINE_MODE env var.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("NOSQLITE_LOG_LEVEL", "WARNING").upper()

    if suppress_console is None:
        suppress_console = os.getenv("NOSQLITE_MACHINE_MODE", "").lower() in ("1", "true", "yes")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
            colorize=True
        )


# Configure the logger on import (will check env var for machine mode)
setup_logging()
