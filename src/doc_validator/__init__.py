"""The document validator package."""

from loguru import logger

from .settings import Settings, get_settings  # noqa: F401

# Library code stays silent until an application enables it
logger.disable(__name__)

__all__ = ["get_settings", "Settings"]
