"""I/O utility functions for MCP Bitbucket."""

from .env import get_list_from_env, is_env_extended_truthy


def is_read_only_mode() -> bool:
    """Check if the server is running in read-only mode.

    Read-only mode hides and refuses every tool that writes to Bitbucket
    (posting comments, resolving tasks) while keeping all read tools.

    Returns:
        True if read-only mode is enabled, False otherwise
    """
    return is_env_extended_truthy("READ_ONLY_MODE", "false")


def get_enabled_tools() -> list[str] | None:
    """Return the tool names listed in ENABLED_TOOLS, or None when unrestricted."""
    return get_list_from_env("ENABLED_TOOLS")


def should_include_tool(tool_name: str, enabled_tools: list[str] | None) -> bool:
    """Check whether a tool passes the ENABLED_TOOLS filter."""
    if enabled_tools is None:
        return True
    return tool_name in enabled_tools
