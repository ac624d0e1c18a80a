"""Registry of the Bitbucket tools exposed over MCP."""

from ..constants import PR_STATES
from . import handlers
from .schema import FieldSpec, ToolSpec, object_schema, validate_fields

WORKSPACE = FieldSpec(
    "string",
    "Bitbucket workspace slug (uses default if not set)",
    required=False,
)
REPO_SLUG = FieldSpec("string", "Repository slug")
PR_ID = FieldSpec("integer", "Pull request ID", minimum=1)

WRITE = frozenset({"write"})

TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="bitbucket_list_prs",
        description=(
            "List pull requests for a Bitbucket Cloud repository. "
            "Returns PR titles, authors, branches, and URLs."
        ),
        fields={
            "workspace": WORKSPACE,
            "repo_slug": REPO_SLUG,
            "state": FieldSpec(
                "string",
                "PR state filter",
                required=False,
                default="OPEN",
                enum_values=PR_STATES,
            ),
            "limit": FieldSpec(
                "integer", "Max results to return", required=False, default=25, minimum=1
            ),
        },
        handler=handlers.list_prs,
    ),
    ToolSpec(
        name="bitbucket_get_pr",
        description=(
            "Get full details of a single pull request including description, "
            "reviewers, and status."
        ),
        fields={"workspace": WORKSPACE, "repo_slug": REPO_SLUG, "pr_id": PR_ID},
        handler=handlers.get_pr,
    ),
    ToolSpec(
        name="bitbucket_get_pr_diff",
        description=(
            "Get the full diff (code changes) for a pull request. "
            "Use this to review what code was changed."
        ),
        fields={"workspace": WORKSPACE, "repo_slug": REPO_SLUG, "pr_id": PR_ID},
        handler=handlers.get_pr_diff,
    ),
    ToolSpec(
        name="bitbucket_list_pr_comments",
        description=(
            "List all comments on a pull request, including inline code comments, "
            "general comments, and the tasks attached to them."
        ),
        fields={
            "workspace": WORKSPACE,
            "repo_slug": REPO_SLUG,
            "pr_id": PR_ID,
            "limit": FieldSpec(
                "integer",
                "Max comments to return",
                required=False,
                default=100,
                minimum=1,
            ),
        },
        handler=handlers.list_pr_comments,
    ),
    ToolSpec(
        name="bitbucket_post_pr_comment",
        description=(
            "Post a comment on a pull request. Supports general comments, inline "
            "comments on specific files/lines, and replies to existing comments."
        ),
        fields={
            "workspace": WORKSPACE,
            "repo_slug": REPO_SLUG,
            "pr_id": PR_ID,
            "content": FieldSpec("string", "Comment content (markdown supported)"),
            "inline": FieldSpec(
                "object",
                "Set this for inline comments on a specific file and line",
                required=False,
                fields={
                    "path": FieldSpec("string", "File path for inline comment"),
                    "line": FieldSpec(
                        "integer", "Line number for inline comment", minimum=1
                    ),
                },
            ),
            "parent_id": FieldSpec(
                "integer",
                "ID of the comment to reply to",
                required=False,
                minimum=1,
            ),
        },
        handler=handlers.post_pr_comment,
        tags=WRITE,
    ),
    ToolSpec(
        name="bitbucket_resolve_pr_task",
        description="Resolve a single task on a pull request.",
        fields={
            "workspace": WORKSPACE,
            "repo_slug": REPO_SLUG,
            "pr_id": PR_ID,
            "task_id": FieldSpec(
                "integer",
                "Task ID to resolve (from bitbucket_list_pr_comments output)",
                minimum=1,
            ),
        },
        handler=handlers.resolve_pr_task,
        tags=WRITE,
    ),
    ToolSpec(
        name="bitbucket_fetch_and_resolve_pr_comments",
        description=(
            "Fetch every comment and task on a pull request, highlight human review "
            "comments that need a reply, and resolve all unresolved tasks."
        ),
        fields={"workspace": WORKSPACE, "repo_slug": REPO_SLUG, "pr_id": PR_ID},
        handler=handlers.fetch_and_resolve_pr_comments,
        tags=WRITE,
    ),
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> ToolSpec | None:
    return TOOLS_BY_NAME.get(name)


__all__ = [
    "TOOLS",
    "TOOLS_BY_NAME",
    "FieldSpec",
    "ToolSpec",
    "get_tool",
    "object_schema",
    "validate_fields",
]
