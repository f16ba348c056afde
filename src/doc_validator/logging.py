"""Logging configuration for the document validator."""

import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the stdlib logging call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_level: str, compact: bool = False):
    """Configure loguru logging for the validator and enable its log output.

    Args:
        log_level: Log level to use (from settings or CLI options).
        compact: If True, use a level + message format without timestamps.
    """
    log_level = log_level.upper()

    logger.remove()
    if compact:
        logger.add(
            sys.stderr,
            format="<level>{level: <8}</level> | <level>{message}</level>",
            level=log_level,
            colorize=True,
        )
    else:
        logger.add(sys.stderr, level=log_level, colorize=True)

    # The package disables its own logger on import; turn it back on
    logger.enable("doc_validator")
    logger.debug(f"Log level set to: {log_level}")

    # Redirect all standard logging to loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("concurrent.futures", "asyncio"):
        logging.getLogger(name).setLevel(log_level)
