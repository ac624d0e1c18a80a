"""Conversion of Bitbucket API and transport failures into readable messages."""

import json
import logging

import httpx

from ..constants import API_TOKEN_URL
from ..exceptions import BitbucketApiError

logger = logging.getLogger("mcp-bitbucket.errors")

NETWORK_ERROR_MESSAGE = (
    "Network error: Could not connect to Bitbucket API. "
    "Check your internet connection."
)
DETAIL_MAX_CHARS = 200


def extract_error_detail(body: str) -> str:
    """Pull a human readable detail out of an error response body.

    Prefers `error.message`, then `message` from a JSON body. A body that is
    not JSON contributes its first 200 characters.
    """
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return (body or "")[:DETAIL_MAX_CHARS]

    if not isinstance(parsed, dict):
        return ""
    error = parsed.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if parsed.get("message"):
        return str(parsed["message"])
    return ""


def _with_detail(headline: str, detail: str, *advice: str) -> str:
    lines = [headline]
    if detail:
        lines.append(f"Detail: {detail}")
    if advice:
        lines.append("")
        lines.extend(advice)
    return "\n".join(lines)


def format_user_message(status_code: int, body: str, context: str) -> str:
    """Build the caller-facing message for an HTTP error status.

    Args:
        status_code: HTTP status returned by Bitbucket
        body: Raw response body
        context: Request description, e.g. "GET /repositories/ws/repo/pullrequests"

    Returns:
        A complete message explaining the failure and what to check next
    """
    detail = extract_error_detail(body)

    if status_code == 401:
        return "\n".join(
            [
                f"Authentication failed ({context}).",
                "",
                "Check that:",
                "1. BITBUCKET_EMAIL is your Atlassian account email",
                "2. BITBUCKET_API_TOKEN is a valid API token with required scopes",
                "3. Token has scopes: pullrequest:read, pullrequest:write, repository:read",
                "",
                f"Create an API token at: {API_TOKEN_URL}",
            ]
        )
    if status_code == 403:
        return _with_detail(
            f"Permission denied ({context}).",
            detail,
            "Ensure your API token has the required scopes.",
        )
    if status_code == 404:
        return _with_detail(
            f"Not found ({context}).",
            detail,
            "Check that the workspace, repository slug, and PR ID are correct.",
        )
    if status_code == 429:
        return "\n".join(
            [
                f"Rate limit exceeded ({context}).",
                "",
                "Bitbucket API rate limit hit. Wait a few minutes before retrying.",
            ]
        )
    return _with_detail(f"Bitbucket API error {status_code} ({context}).", detail)


def handle_api_error(error: BaseException, context: str) -> str:
    """Log a failure and convert it into a message for the tool caller.

    Never raises. The raw error goes to the log at ERROR level; the returned
    text never contains a traceback.

    Args:
        error: The exception raised while serving a tool call
        context: What was being done, e.g. "getting PR #42"

    Returns:
        The sanitized message
    """
    logger.error(f"{context}: {error!r}")

    if isinstance(error, BitbucketApiError):
        return error.user_message

    if isinstance(error, httpx.TransportError | OSError):
        return NETWORK_ERROR_MESSAGE

    message = str(error)
    if message:
        return f"Error in {context}: {message}"
    return f"Unknown error in {context}."
