"""Plain-text reports returned by the Bitbucket tools.

Rendering is pure: the same fetched data always renders to the same text.
"""

from .comments import (
    group_tasks_by_comment,
    partition_top_level,
    render_comment_list,
    standalone_tasks,
)
from .diffs import MAX_DIFF_SIZE, diff_stats, render_diff
from .pull_requests import render_pull_request, render_pull_request_list
from .review import PullRequestReview, render_review

__all__ = [
    "MAX_DIFF_SIZE",
    "PullRequestReview",
    "diff_stats",
    "group_tasks_by_comment",
    "partition_top_level",
    "render_comment_list",
    "render_diff",
    "render_pull_request",
    "render_pull_request_list",
    "render_review",
    "standalone_tasks",
]
