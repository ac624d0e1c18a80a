"""
Base model for Bitbucket API payloads.

All entities are read-only snapshots of what the API returned for one tool
call; nothing is cached between calls.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from .constants import UNKNOWN


class ApiModel(BaseModel):
    """Frozen pydantic model built from an API response."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ApiModel":
        raise NotImplementedError


def user_display_name(user: Any) -> str:
    """Display name of a Bitbucket user object, falling back to its nickname."""
    if not isinstance(user, dict):
        return UNKNOWN
    return user.get("display_name") or user.get("nickname") or UNKNOWN


def html_url(data: dict[str, Any]) -> str | None:
    """Return `links.html.href` from a Bitbucket resource, if present."""
    links = data.get("links")
    if isinstance(links, dict):
        html = links.get("html")
        if isinstance(html, dict):
            return html.get("href")
    return None


def raw_content(data: dict[str, Any]) -> str:
    """Return `content.raw` from a comment or task payload."""
    content = data.get("content")
    if isinstance(content, dict):
        return content.get("raw") or ""
    return ""
