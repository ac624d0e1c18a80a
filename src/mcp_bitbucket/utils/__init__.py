"""
Utility functions for the MCP Bitbucket integration.
This package provides various utility functions used throughout the codebase.
"""

from .bots import DEFAULT_BOT_PATTERNS, BotDetector
from .errors import handle_api_error
from .io import is_read_only_mode
from .logging import log_config_param, mask_sensitive

__all__ = [
    "DEFAULT_BOT_PATTERNS",
    "BotDetector",
    "handle_api_error",
    "is_read_only_mode",
    "log_config_param",
    "mask_sensitive",
]
