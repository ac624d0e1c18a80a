"""Constants shared across MCP Bitbucket."""

from typing import Final

DEFAULT_API_BASE_URL: Final[str] = "https://api.bitbucket.org/2.0"
API_TOKEN_URL: Final[str] = "https://bitbucket.org/account/settings/api-tokens/"
DEFAULT_TIMEOUT: Final[float] = 30.0

# Bitbucket Cloud rejects pagelen values above this.
MAX_PAGE_SIZE: Final[int] = 100

# Comments and tasks fetched by the review operation.
REVIEW_FETCH_LIMIT: Final[int] = 100

PR_STATES: Final[tuple[str, ...]] = ("OPEN", "MERGED", "DECLINED", "SUPERSEDED")
TASK_STATE_RESOLVED: Final[str] = "RESOLVED"
TASK_STATE_UNRESOLVED: Final[str] = "UNRESOLVED"
