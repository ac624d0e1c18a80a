"""Module for Bitbucket pull request comment and task operations."""

import asyncio
import logging
from dataclasses import dataclass

from ..constants import REVIEW_FETCH_LIMIT, TASK_STATE_RESOLVED
from ..models.bitbucket import BitbucketComment, BitbucketTask
from .client import BitbucketClient
from .pull_requests import pull_request_path

logger = logging.getLogger("mcp-bitbucket.comments")


@dataclass(frozen=True)
class TaskResolution:
    """Outcome of resolving one task in a batch.

    `index` is the task's position in the submitted batch. Exactly one of
    `value` (the updated task) and `error` is set.
    """

    index: int
    task: BitbucketTask
    value: BitbucketTask | None = None
    error: BaseException | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class CommentsMixin(BitbucketClient):
    """Mixin for pull request comments and the tasks attached to them."""

    async def list_comments(
        self, workspace: str, repo_slug: str, pr_id: int, limit: int = 100
    ) -> list[BitbucketComment]:
        """List comments on a pull request, general and inline, in API order."""
        values = await self.paginate(
            f"{pull_request_path(workspace, repo_slug, pr_id)}/comments", limit
        )
        return [BitbucketComment.from_api_response(data) for data in values]

    async def list_tasks(
        self, workspace: str, repo_slug: str, pr_id: int, limit: int = 100
    ) -> list[BitbucketTask]:
        """List tasks on a pull request, resolved and unresolved."""
        values = await self.paginate(
            f"{pull_request_path(workspace, repo_slug, pr_id)}/tasks", limit
        )
        return [BitbucketTask.from_api_response(data) for data in values]

    async def _list_tasks_or_empty(
        self, workspace: str, repo_slug: str, pr_id: int, limit: int
    ) -> list[BitbucketTask]:
        try:
            return await self.list_tasks(workspace, repo_slug, pr_id, limit)
        except Exception as e:  # noqa: BLE001 - tasks are optional enrichment
            logger.warning(
                f"Could not fetch tasks for PR #{pr_id} in {workspace}/{repo_slug}, "
                f"continuing without them: {e!r}"
            )
            return []

    async def list_comments_and_tasks(
        self,
        workspace: str,
        repo_slug: str,
        pr_id: int,
        comment_limit: int = REVIEW_FETCH_LIMIT,
        task_limit: int = REVIEW_FETCH_LIMIT,
    ) -> tuple[list[BitbucketComment], list[BitbucketTask]]:
        """Fetch comments and tasks concurrently.

        A failure to fetch comments propagates. A failure to fetch tasks is
        logged and yields an empty task list.
        """
        comments, tasks = await asyncio.gather(
            self.list_comments(workspace, repo_slug, pr_id, comment_limit),
            self._list_tasks_or_empty(workspace, repo_slug, pr_id, task_limit),
        )
        return comments, tasks

    async def resolve_task(
        self, workspace: str, repo_slug: str, pr_id: int, task_id: int
    ) -> BitbucketTask:
        """Mark a task as resolved. Resolving a resolved task is a no-op upstream."""
        logger.debug(f"Resolving task #{task_id} on PR #{pr_id}")
        response = await self.request(
            f"{pull_request_path(workspace, repo_slug, pr_id)}/tasks/{task_id}",
            method="PUT",
            json_data={"state": TASK_STATE_RESOLVED},
        )
        if not response:
            return BitbucketTask(id=task_id, state=TASK_STATE_RESOLVED)
        return BitbucketTask.from_api_response(response)

    async def resolve_tasks(
        self,
        workspace: str,
        repo_slug: str,
        pr_id: int,
        tasks: list[BitbucketTask],
    ) -> list[TaskResolution]:
        """Resolve several tasks concurrently.

        Every task gets its own outcome; one failure never cancels or hides
        the others. Outcomes are returned in the order of `tasks`.
        """
        results = await asyncio.gather(
            *(
                self.resolve_task(workspace, repo_slug, pr_id, task.id)
                for task in tasks
            ),
            return_exceptions=True,
        )

        resolutions = []
        for index, (task, result) in enumerate(zip(tasks, results, strict=True)):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to resolve task #{task.id}: {result!r}")
                resolutions.append(TaskResolution(index=index, task=task, error=result))
            else:
                resolutions.append(TaskResolution(index=index, task=task, value=result))
        return resolutions
