"""Report for the fetch-and-resolve review of a pull request."""

from dataclasses import dataclass, field

from ..bitbucket.comments import TaskResolution
from ..models.bitbucket import BitbucketComment, BitbucketTask
from .comments import (
    BotPredicate,
    format_task,
    group_tasks_by_comment,
    partition_top_level,
    render_standalone_tasks,
    standalone_tasks,
)

REPLY_TOOL_NAME = "bitbucket_post_pr_comment"


@dataclass(frozen=True)
class PullRequestReview:
    """Everything fetched and changed while reviewing one pull request."""

    workspace: str
    repo_slug: str
    pr_id: int
    comments: list[BitbucketComment]
    tasks: list[BitbucketTask]
    resolutions: list[TaskResolution] = field(default_factory=list)

    @property
    def unresolved_tasks(self) -> list[BitbucketTask]:
        return [task for task in self.tasks if not task.is_resolved]


def _anchor(comment: BitbucketComment, inline_prefix: str) -> str:
    if comment.inline is not None:
        return f"{inline_prefix}{comment.inline.location}"
    return " - General"


def _render_all_comments(
    review: PullRequestReview, is_bot: BotPredicate
) -> list[str]:
    tasks_by_comment = group_tasks_by_comment(review.tasks)
    lines = ["--- ALL COMMENTS ---\n"]
    for comment in review.comments:
        author = comment.author_display_name
        tag = "[BOT]" if is_bot(author) else "[HUMAN]"
        lines.append(
            f"[Comment #{comment.id}] {tag} @{author}{_anchor(comment, ' - ')}"
        )
        if comment.is_reply:
            lines.append(f"  (reply to #{comment.parent_id})")
        lines.append(f"  {comment.content}")
        for task in tasks_by_comment.get(comment.id, []):
            lines.append(f"  {format_task(task)}")
        lines.append("")
    return lines


def _render_human_comments(humans: list[BitbucketComment]) -> list[str]:
    if not humans:
        return []
    lines = ["--- HUMAN REVIEW COMMENTS REQUIRING ATTENTION ---\n"]
    for comment in humans:
        lines.append(
            f"[Comment #{comment.id}] @{comment.author_display_name}"
            f"{_anchor(comment, ' on ')}"
        )
        lines.append(f'  "{comment.content}"')
        lines.append(
            f"  -> Address this in code, then reply using {REPLY_TOOL_NAME} "
            f"with parent_id={comment.id}"
        )
        lines.append("")
    return lines


def _render_task_resolution(review: PullRequestReview) -> list[str]:
    lines = ["--- TASK RESOLUTION ---\n"]
    if not review.resolutions:
        lines.append("No unresolved tasks to resolve.")
        return lines

    lines.append(f"Resolving {len(review.resolutions)} unresolved task(s)...\n")
    resolved = failed = 0
    for outcome in sorted(review.resolutions, key=lambda r: r.index):
        task = outcome.task
        if outcome.success:
            lines.append(f"  ✓ Resolved Task #{task.id}: {task.content}")
            resolved += 1
        else:
            lines.append(f"  ✗ Failed Task #{task.id}: {task.content}")
            lines.append(f"    Error: {outcome.error}")
            failed += 1

    lines.append(f"\nTasks done. {resolved} resolved, {failed} failed.")
    return lines


def render_review(review: PullRequestReview, is_bot: BotPredicate) -> str:
    """Render the review report.

    Sections: all comments with their tasks, tasks whose comment was not
    fetched, top-level human comments needing a reply, the outcome of
    resolving every unresolved task, and a bot/human summary.
    """
    bots, humans = partition_top_level(review.comments, is_bot)

    lines = [
        f"PR #{review.pr_id} - {review.workspace}/{review.repo_slug}\n",
        f"Fetched {len(review.comments)} comment(s), {len(review.tasks)} task(s).\n",
    ]
    lines.extend(_render_all_comments(review, is_bot))
    lines.extend(render_standalone_tasks(standalone_tasks(review.tasks, review.comments)))
    lines.extend(_render_human_comments(humans))
    lines.extend(_render_task_resolution(review))
    lines.append(
        f"\nSummary: {len(bots)} bot comment(s), {len(humans)} human comment(s) "
        "needing review."
    )
    return "\n".join(lines)
