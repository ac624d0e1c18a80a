"""Bitbucket Cloud API module for mcp_bitbucket.

This module provides the Bitbucket Cloud API client implementation.
"""

from .client import BitbucketClient
from .comments import CommentsMixin, TaskResolution
from .config import BitbucketConfig
from .pull_requests import PullRequestsMixin


class BitbucketFetcher(
    PullRequestsMixin,
    CommentsMixin,
):
    """
    The main Bitbucket client class providing access to all Bitbucket operations.

    This class inherits from multiple mixins that provide specific functionality:
    - PullRequestsMixin: Pull requests, diffs and posting comments
    - CommentsMixin: Listing comments and tasks, resolving tasks
    """

    pass


__all__ = [
    "BitbucketFetcher",
    "BitbucketConfig",
    "BitbucketClient",
    "TaskResolution",
]
