"""Shared infrastructure — logging.

This package is framework-agnostic. It must NEVER import from ``botapi/`` or ``botkit/``.
"""

from core.logger import BotLogger, get_child_logger

__all__ = [
    "BotLogger",
    "get_child_logger",
]
