"""
Pydantic models for Bitbucket Cloud API responses.
"""

from .base import ApiModel
from .bitbucket import (
    BitbucketComment,
    BitbucketInlineAnchor,
    BitbucketPage,
    BitbucketPullRequest,
    BitbucketTask,
)

__all__ = [
    "ApiModel",
    "BitbucketComment",
    "BitbucketInlineAnchor",
    "BitbucketPage",
    "BitbucketPullRequest",
    "BitbucketTask",
]
