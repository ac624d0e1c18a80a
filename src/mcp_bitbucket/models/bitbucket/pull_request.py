"""
Bitbucket pull request models.

This module provides Pydantic models for Bitbucket Cloud pull requests.
"""

import logging
from typing import Any

from ..base import ApiModel, html_url, user_display_name
from ..constants import EMPTY_STRING, UNKNOWN

logger = logging.getLogger("mcp-bitbucket.models")


def _branch_name(ref: Any) -> str:
    if isinstance(ref, dict) and isinstance(branch := ref.get("branch"), dict):
        return branch.get("name", EMPTY_STRING)
    return EMPTY_STRING


class BitbucketPullRequest(ApiModel):
    """
    Model representing a Bitbucket Cloud pull request.

    The state is one of OPEN, MERGED, DECLINED or SUPERSEDED and only ever
    changes on the Bitbucket side.
    """

    id: int = 0
    title: str = UNKNOWN
    description: str | None = None
    state: str = EMPTY_STRING
    source_branch: str = EMPTY_STRING
    destination_branch: str = EMPTY_STRING
    author_display_name: str = UNKNOWN
    created_on: str = EMPTY_STRING
    updated_on: str = EMPTY_STRING
    reviewers: list[str] = []
    comment_count: int = 0
    task_count: int = 0
    url: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "BitbucketPullRequest":
        """
        Create a BitbucketPullRequest from a Bitbucket API response.

        Args:
            data: The pull request data from the Bitbucket API

        Returns:
            A BitbucketPullRequest instance
        """
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary data, returning default instance")
            return cls()

        reviewers = [
            user_display_name(reviewer)
            for reviewer in data.get("reviewers") or []
            if isinstance(reviewer, dict)
        ]

        return cls(
            id=data.get("id", 0),
            title=data.get("title") or UNKNOWN,
            description=data.get("description") or None,
            state=data.get("state", EMPTY_STRING),
            source_branch=_branch_name(data.get("source")),
            destination_branch=_branch_name(data.get("destination")),
            author_display_name=user_display_name(data.get("author")),
            created_on=data.get("created_on") or EMPTY_STRING,
            updated_on=data.get("updated_on") or EMPTY_STRING,
            reviewers=reviewers,
            comment_count=data.get("comment_count") or 0,
            task_count=data.get("task_count") or 0,
            url=html_url(data),
        )

    @property
    def created_date(self) -> str:
        """Date part of the creation timestamp (YYYY-MM-DD)."""
        return self.created_on.split("T")[0]
