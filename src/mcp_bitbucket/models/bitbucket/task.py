"""
Bitbucket pull request task models.
"""

import logging
from typing import Any

from ...constants import TASK_STATE_RESOLVED, TASK_STATE_UNRESOLVED
from ..base import ApiModel, raw_content, user_display_name
from ..constants import EMPTY_STRING, UNKNOWN

logger = logging.getLogger("mcp-bitbucket.models")


class BitbucketTask(ApiModel):
    """
    Model representing a pull request task.

    Every task belongs to exactly one comment. That comment may lie outside
    the window of comments fetched alongside it.
    """

    id: int = 0
    content: str = EMPTY_STRING
    state: str = TASK_STATE_UNRESOLVED
    creator_display_name: str = UNKNOWN
    comment_id: int | None = None
    created_on: str = EMPTY_STRING

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "BitbucketTask":
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary data, returning default instance")
            return cls()

        comment_id = None
        if isinstance(comment := data.get("comment"), dict):
            comment_id = comment.get("id")

        return cls(
            id=data.get("id", 0),
            content=raw_content(data),
            state=data.get("state") or TASK_STATE_UNRESOLVED,
            creator_display_name=user_display_name(data.get("creator")),
            comment_id=comment_id,
            created_on=data.get("created_on") or EMPTY_STRING,
        )

    @property
    def is_resolved(self) -> bool:
        return self.state == TASK_STATE_RESOLVED
