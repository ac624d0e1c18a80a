"""Text reports for pull request listings and details."""

from ..models.bitbucket import BitbucketPullRequest


def format_branches(pr: BitbucketPullRequest) -> str:
    return f"{pr.source_branch} -> {pr.destination_branch}"


def render_pull_request_list(
    prs: list[BitbucketPullRequest], workspace: str, repo_slug: str, state: str
) -> str:
    """Render a listing of pull requests in one state."""
    state_label = state.lower()
    if not prs:
        return f"No {state_label} pull requests found in {workspace}/{repo_slug}."

    lines = [
        f"Found {len(prs)} {state_label} pull request(s) in {workspace}/{repo_slug}:\n"
    ]
    for pr in prs:
        lines.append(f"PR #{pr.id}: {pr.title}")
        lines.append(f"  Author: {pr.author_display_name}")
        lines.append(f"  Branch: {format_branches(pr)}")
        lines.append(f"  Created: {pr.created_date}")
        lines.append(f"  Comments: {pr.comment_count} | Tasks: {pr.task_count}")
        lines.append(f"  URL: {pr.url or 'N/A'}")
        lines.append("")

    return "\n".join(lines)


def render_pull_request(pr: BitbucketPullRequest) -> str:
    """Render the full details of one pull request."""
    reviewers = ", ".join(pr.reviewers) if pr.reviewers else "None"

    lines = [
        f"PR #{pr.id}: {pr.title}",
        f"State: {pr.state}",
        f"Author: {pr.author_display_name}",
        f"Branch: {format_branches(pr)}",
        f"Reviewers: {reviewers}",
        f"Created: {pr.created_on}",
        f"Updated: {pr.updated_on}",
        f"Comments: {pr.comment_count} | Tasks: {pr.task_count}",
        f"URL: {pr.url or 'N/A'}",
    ]

    if pr.description:
        lines.extend(["", "--- Description ---", pr.description])

    return "\n".join(lines)
