"""Module for Bitbucket pull request operations."""

import logging
from typing import Any

from ..models.bitbucket import BitbucketComment, BitbucketPullRequest
from .client import BitbucketClient

logger = logging.getLogger("mcp-bitbucket.pull_requests")


def pull_request_path(workspace: str, repo_slug: str, pr_id: int | None = None) -> str:
    """API path of a repository's pull requests, or of one pull request."""
    path = f"/repositories/{workspace}/{repo_slug}/pullrequests"
    if pr_id is not None:
        path = f"{path}/{pr_id}"
    return path


class PullRequestsMixin(BitbucketClient):
    """Mixin for Bitbucket Cloud pull request operations.

    This mixin provides methods for reading pull requests and their diffs,
    and for posting comments on them.
    """

    async def list_pull_requests(
        self,
        workspace: str,
        repo_slug: str,
        state: str = "OPEN",
        limit: int = 25,
    ) -> list[BitbucketPullRequest]:
        """
        List pull requests for a repository.

        Args:
            workspace: Workspace slug
            repo_slug: Repository slug
            state: Filter by state (OPEN, MERGED, DECLINED, SUPERSEDED)
            limit: Maximum number of pull requests to return

        Returns:
            List of BitbucketPullRequest objects
        """
        logger.debug(f"Listing {state} pull requests in {workspace}/{repo_slug}")
        values = await self.paginate(
            pull_request_path(workspace, repo_slug),
            limit,
            params={"state": state},
        )
        return [BitbucketPullRequest.from_api_response(pr_data) for pr_data in values]

    async def get_pull_request(
        self, workspace: str, repo_slug: str, pr_id: int
    ) -> BitbucketPullRequest:
        """
        Get detailed information about a specific pull request.

        Raises:
            BitbucketApiError: If the pull request does not exist or cannot be read
        """
        pr_data = await self.request(pull_request_path(workspace, repo_slug, pr_id))
        return BitbucketPullRequest.from_api_response(pr_data)

    async def get_pull_request_diff(
        self, workspace: str, repo_slug: str, pr_id: int
    ) -> str:
        """Get the unified diff of a pull request as plain text."""
        return await self.request_text(
            f"{pull_request_path(workspace, repo_slug, pr_id)}/diff"
        )

    async def post_comment(
        self,
        workspace: str,
        repo_slug: str,
        pr_id: int,
        content: str,
        inline_path: str | None = None,
        inline_line: int | None = None,
        parent_id: int | None = None,
    ) -> BitbucketComment:
        """
        Post a comment on a pull request.

        Args:
            workspace: Workspace slug
            repo_slug: Repository slug
            pr_id: Pull request ID
            content: Comment text (markdown)
            inline_path: File path, for an inline comment
            inline_line: Line in the new version of the file, for an inline comment
            parent_id: ID of the comment being replied to

        Returns:
            The created BitbucketComment
        """
        payload: dict[str, Any] = {"content": {"raw": content}}

        if inline_path is not None and inline_line is not None:
            payload["inline"] = {"to": inline_line, "path": inline_path}

        if parent_id is not None:
            payload["parent"] = {"id": parent_id}

        logger.debug(f"Posting comment on PR #{pr_id} in {workspace}/{repo_slug}")
        response = await self.request(
            f"{pull_request_path(workspace, repo_slug, pr_id)}/comments",
            method="POST",
            json_data=payload,
        )
        return BitbucketComment.from_api_response(response)
