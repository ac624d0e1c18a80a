"""Bitbucket data models."""

from .comment import BitbucketComment, BitbucketInlineAnchor
from .page import BitbucketPage
from .pull_request import BitbucketPullRequest
from .task import BitbucketTask

__all__ = [
    "BitbucketComment",
    "BitbucketInlineAnchor",
    "BitbucketPage",
    "BitbucketPullRequest",
    "BitbucketTask",
]
