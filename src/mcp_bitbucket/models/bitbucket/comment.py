"""
Bitbucket pull request comment models.
"""

import logging
from typing import Any

from ..base import ApiModel, html_url, raw_content, user_display_name
from ..constants import EMPTY_STRING, UNKNOWN

logger = logging.getLogger("mcp-bitbucket.models")


class BitbucketInlineAnchor(ApiModel):
    """File and line a comment is attached to, as of when it was written.

    `to_line` is the line in the new version of the file, `from_line` the
    line in the old one. Anchors are not re-validated against later commits.
    """

    path: str = EMPTY_STRING
    from_line: int | None = None
    to_line: int | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "BitbucketInlineAnchor":
        return cls(
            path=data.get("path") or EMPTY_STRING,
            from_line=data.get("from"),
            to_line=data.get("to"),
        )

    @property
    def line(self) -> int | str:
        if self.to_line is not None:
            return self.to_line
        if self.from_line is not None:
            return self.from_line
        return "?"

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}"


class BitbucketComment(ApiModel):
    """
    Model representing a comment on a Bitbucket Cloud pull request.

    Replies carry the id of their parent; only one level of threading is
    represented.
    """

    id: int = 0
    content: str = EMPTY_STRING
    author_display_name: str = UNKNOWN
    created_on: str = EMPTY_STRING
    updated_on: str = EMPTY_STRING
    inline: BitbucketInlineAnchor | None = None
    parent_id: int | None = None
    url: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "BitbucketComment":
        """
        Create a BitbucketComment from a Bitbucket API response.

        Args:
            data: The comment data from the Bitbucket API

        Returns:
            A BitbucketComment instance
        """
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary data, returning default instance")
            return cls()

        inline = None
        if isinstance(inline_data := data.get("inline"), dict):
            inline = BitbucketInlineAnchor.from_api_response(inline_data)

        parent_id = None
        if isinstance(parent := data.get("parent"), dict):
            parent_id = parent.get("id")

        return cls(
            id=data.get("id", 0),
            content=raw_content(data),
            author_display_name=user_display_name(data.get("user")),
            created_on=data.get("created_on") or EMPTY_STRING,
            updated_on=data.get("updated_on") or EMPTY_STRING,
            inline=inline,
            parent_id=parent_id,
            url=html_url(data),
        )

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def created_date(self) -> str:
        return self.created_on.split("T")[0]

    @property
    def created_time(self) -> str:
        """HH:MM part of the creation timestamp, empty when absent."""
        parts = self.created_on.split("T")
        return parts[1][:5] if len(parts) > 1 else ""
