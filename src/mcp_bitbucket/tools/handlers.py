"""Tool handlers: one Bitbucket operation each, rendered as text.

Every handler takes the fetcher plus the validated tool arguments as keyword
arguments and always returns text; failures are converted by
`handle_api_errors`.
"""

import logging
from dataclasses import replace
from typing import Any

from ..bitbucket import BitbucketFetcher
from ..constants import REVIEW_FETCH_LIMIT
from ..reports import (
    PullRequestReview,
    render_comment_list,
    render_diff,
    render_pull_request,
    render_pull_request_list,
    render_review,
)
from ..utils.bots import BotDetector
from ..utils.decorators import handle_api_errors

logger = logging.getLogger("mcp-bitbucket.tools")


@handle_api_errors("listing pull requests")
async def list_prs(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    workspace: str | None = None,
    state: str = "OPEN",
    limit: int = 25,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    prs = await fetcher.list_pull_requests(workspace, repo_slug, state=state, limit=limit)
    return render_pull_request_list(prs, workspace, repo_slug, state)


@handle_api_errors("getting PR #{pr_id}")
async def get_pr(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    workspace: str | None = None,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    pr = await fetcher.get_pull_request(workspace, repo_slug, pr_id)
    return render_pull_request(pr)


@handle_api_errors("getting diff for PR #{pr_id}")
async def get_pr_diff(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    workspace: str | None = None,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    diff = await fetcher.get_pull_request_diff(workspace, repo_slug, pr_id)
    return render_diff(diff, pr_id, workspace, repo_slug)


@handle_api_errors("listing comments on PR #{pr_id}")
async def list_pr_comments(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    workspace: str | None = None,
    limit: int = 100,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    comments, tasks = await fetcher.list_comments_and_tasks(
        workspace, repo_slug, pr_id, comment_limit=limit
    )
    return render_comment_list(comments, tasks, pr_id, workspace, repo_slug)


@handle_api_errors("posting comment on PR #{pr_id}")
async def post_pr_comment(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    content: str,
    workspace: str | None = None,
    inline: dict[str, Any] | None = None,
    parent_id: int | None = None,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    inline_path = inline["path"] if inline else None
    inline_line = inline["line"] if inline else None

    comment = await fetcher.post_comment(
        workspace,
        repo_slug,
        pr_id,
        content,
        inline_path=inline_path,
        inline_line=inline_line,
        parent_id=parent_id,
    )

    lines = [f"Comment posted on PR #{pr_id}.", f"Comment ID: {comment.id}"]
    if inline:
        lines.append(f"Type: Inline comment on {inline_path}:{inline_line}")
    else:
        lines.append("Type: General comment")
    if parent_id is not None:
        lines.append(f"Reply to: comment #{parent_id}")
    lines.append(f"URL: {comment.url or 'N/A'}")
    return "\n".join(lines)


@handle_api_errors("resolving task #{task_id} on PR #{pr_id}")
async def resolve_pr_task(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    task_id: int,
    workspace: str | None = None,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    task = await fetcher.resolve_task(workspace, repo_slug, pr_id, task_id)
    return "\n".join(
        [
            f"Task #{task.id} resolved on PR #{pr_id}.",
            f"State: {task.state}",
            f"Task: {task.content}",
        ]
    )


@handle_api_errors("fetching and resolving comments on PR #{pr_id}")
async def fetch_and_resolve_pr_comments(
    fetcher: BitbucketFetcher,
    *,
    repo_slug: str,
    pr_id: int,
    workspace: str | None = None,
) -> str:
    workspace = fetcher.config.resolve_workspace(workspace)
    # Must not raise once tasks have been resolved.
    bots = BotDetector(fetcher.config.bot_patterns)
    comments, tasks = await fetcher.list_comments_and_tasks(
        workspace,
        repo_slug,
        pr_id,
        comment_limit=REVIEW_FETCH_LIMIT,
        task_limit=REVIEW_FETCH_LIMIT,
    )
    review = PullRequestReview(
        workspace=workspace,
        repo_slug=repo_slug,
        pr_id=pr_id,
        comments=comments,
        tasks=tasks,
    )

    unresolved = review.unresolved_tasks
    if unresolved:
        logger.info(f"Resolving {len(unresolved)} unresolved task(s) on PR #{pr_id}")
        resolutions = await fetcher.resolve_tasks(workspace, repo_slug, pr_id, unresolved)
        review = replace(review, resolutions=resolutions)

    return render_review(review, bots)
