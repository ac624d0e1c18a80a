"""Joining comments with their tasks, and the comment listing report."""

from collections.abc import Callable, Iterable

from ..models.bitbucket import BitbucketComment, BitbucketTask

BotPredicate = Callable[[str], bool]


def group_tasks_by_comment(
    tasks: Iterable[BitbucketTask],
) -> dict[int | None, list[BitbucketTask]]:
    """Map each comment id to the tasks attached to it, keeping task order."""
    grouped: dict[int | None, list[BitbucketTask]] = {}
    for task in tasks:
        grouped.setdefault(task.comment_id, []).append(task)
    return grouped


def standalone_tasks(
    tasks: Iterable[BitbucketTask], comments: Iterable[BitbucketComment]
) -> list[BitbucketTask]:
    """Tasks whose owning comment is not among the fetched comments."""
    comment_ids = {comment.id for comment in comments}
    return [task for task in tasks if task.comment_id not in comment_ids]


def partition_top_level(
    comments: Iterable[BitbucketComment], is_bot: BotPredicate
) -> tuple[list[BitbucketComment], list[BitbucketComment]]:
    """Split top-level comments into (bot, human). Replies go in neither."""
    bots: list[BitbucketComment] = []
    humans: list[BitbucketComment] = []
    for comment in comments:
        if comment.is_reply:
            continue
        if is_bot(comment.author_display_name):
            bots.append(comment)
        else:
            humans.append(comment)
    return bots, humans


def format_task(task: BitbucketTask) -> str:
    return f"[Task #{task.id}] {task.state}: {task.content}"


def format_standalone_task(task: BitbucketTask) -> str:
    owner = f"comment #{task.comment_id}" if task.comment_id is not None else "no comment"
    return (
        f"{format_task(task)} (by {task.creator_display_name} on {owner}, "
        "not in fetched comments)"
    )


def render_standalone_tasks(tasks: list[BitbucketTask]) -> list[str]:
    if not tasks:
        return []
    lines = ["--- STANDALONE TASKS ---\n"]
    lines.extend(format_standalone_task(task) for task in tasks)
    lines.append("")
    return lines


def render_comment_list(
    comments: list[BitbucketComment],
    tasks: list[BitbucketTask],
    pr_id: int,
    workspace: str,
    repo_slug: str,
) -> str:
    """Render every comment with its tasks, then tasks with no fetched comment."""
    if not comments and not tasks:
        return f"No comments on PR #{pr_id} in {workspace}/{repo_slug}."

    tasks_by_comment = group_tasks_by_comment(tasks)
    lines = [
        f"Found {len(comments)} comment(s) and {len(tasks)} task(s) on PR #{pr_id}:\n"
    ]

    for comment in comments:
        stamp = f"{comment.created_date} {comment.created_time}".strip()
        author = comment.author_display_name
        if comment.inline is not None:
            lines.append(f"[{stamp}] @{author} - INLINE on {comment.inline.location}")
        else:
            lines.append(f"[{stamp}] @{author} - General comment")

        if comment.is_reply:
            lines.append(f"  (reply to comment #{comment.parent_id})")

        lines.append(f"  {comment.content}")
        for task in tasks_by_comment.get(comment.id, []):
            lines.append(f"  {format_task(task)}")
        lines.append("")

    lines.extend(render_standalone_tasks(standalone_tasks(tasks, comments)))
    return "\n".join(lines)
