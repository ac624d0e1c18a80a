"""Environment variable utility functions for MCP Bitbucket."""

import json
import logging
import os

logger = logging.getLogger("mcp-bitbucket.utils.env")


def is_env_extended_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if environment variable is set to an extended truthy value.

    Considers 'true', '1', 'yes', 'y', 'on' as truthy values (case-insensitive).
    Used for READ_ONLY_MODE and similar flags.
    """
    return os.getenv(env_var_name, default).lower() in ("true", "1", "yes", "y", "on")


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to false values.

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True unless explicitly set to false values
    """
    return os.getenv(env_var_name, default).lower() not in ("false", "0", "no")


def get_custom_headers(env_var_name: str) -> dict[str, str] | None:
    """Parse custom HTTP headers given as a JSON object in an environment variable.

    Invalid JSON or a non-object value is logged and ignored.
    """
    raw = os.getenv(env_var_name)
    if not raw:
        return None
    try:
        headers = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Ignoring {env_var_name}: value is not valid JSON")
        return None
    if not isinstance(headers, dict):
        logger.warning(f"Ignoring {env_var_name}: expected a JSON object")
        return None
    return {str(k): str(v) for k, v in headers.items()}


def get_list_from_env(env_var_name: str) -> list[str] | None:
    """Split a comma-separated environment variable into stripped, non-empty items."""
    raw = os.getenv(env_var_name)
    if not raw:
        return None
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or None
