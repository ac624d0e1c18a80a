"""Configuration module for Bitbucket Cloud API interactions."""

import logging
import os
from dataclasses import dataclass, field

from ..constants import API_TOKEN_URL, DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT
from ..exceptions import MissingCredentialsError, MissingWorkspaceError
from ..utils.bots import DEFAULT_BOT_PATTERNS, invalid_patterns
from ..utils.env import get_custom_headers, get_list_from_env, is_env_ssl_verify

logger = logging.getLogger("mcp-bitbucket.config")


@dataclass
class BitbucketConfig:
    """Configuration for Bitbucket Cloud API access.

    Bitbucket API tokens authenticate with HTTP Basic auth using the
    Atlassian account email as the username and the token as the password.
    """

    email: str
    api_token: str
    workspace: str | None = None
    url: str = DEFAULT_API_BASE_URL
    ssl_verify: bool = True
    custom_headers: dict[str, str] | None = None
    bot_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_BOT_PATTERNS))
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.email or not self.api_token:
            raise MissingCredentialsError(missing_credentials_message())
        self.url = self.url.rstrip("/")
        if invalid := invalid_patterns(self.bot_patterns):
            logger.warning(
                f"Invalid BITBUCKET_BOT_PATTERNS {invalid}, using default bot patterns"
            )
            self.bot_patterns = list(DEFAULT_BOT_PATTERNS)

    @classmethod
    def from_env(cls) -> "BitbucketConfig":
        """Create configuration from environment variables.

        Environment variables:
            BITBUCKET_EMAIL: Atlassian account email (required)
            BITBUCKET_API_TOKEN: Bitbucket API token (required)
            BITBUCKET_WORKSPACE: Default workspace slug
            BITBUCKET_API_BASE_URL: API base URL override
            BITBUCKET_SSL_VERIFY: SSL verification setting
            BITBUCKET_CUSTOM_HEADERS: Custom HTTP headers (JSON object)
            BITBUCKET_BOT_PATTERNS: Comma-separated bot author regexes
            BITBUCKET_TIMEOUT: HTTP timeout in seconds

        Returns:
            BitbucketConfig instance

        Raises:
            MissingCredentialsError: If the email or API token is missing
        """
        email = os.getenv("BITBUCKET_EMAIL")
        api_token = os.getenv("BITBUCKET_API_TOKEN")
        if not email or not api_token:
            raise MissingCredentialsError(missing_credentials_message())

        timeout = DEFAULT_TIMEOUT
        if raw_timeout := os.getenv("BITBUCKET_TIMEOUT"):
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    f"Invalid BITBUCKET_TIMEOUT '{raw_timeout}', using {DEFAULT_TIMEOUT}s"
                )

        return cls(
            email=email,
            api_token=api_token,
            workspace=os.getenv("BITBUCKET_WORKSPACE") or None,
            url=os.getenv("BITBUCKET_API_BASE_URL") or DEFAULT_API_BASE_URL,
            ssl_verify=is_env_ssl_verify("BITBUCKET_SSL_VERIFY"),
            custom_headers=get_custom_headers("BITBUCKET_CUSTOM_HEADERS"),
            bot_patterns=get_list_from_env("BITBUCKET_BOT_PATTERNS")
            or list(DEFAULT_BOT_PATTERNS),
            timeout=timeout,
        )

    def resolve_workspace(self, workspace: str | None = None) -> str:
        """Return the explicit workspace, falling back to the configured default.

        Raises:
            MissingWorkspaceError: If neither is available
        """
        resolved = workspace or self.workspace
        if not resolved:
            raise MissingWorkspaceError(
                "No workspace specified. Provide workspace parameter "
                "or set BITBUCKET_WORKSPACE env var."
            )
        return resolved


def missing_credentials_message() -> str:
    return "\n".join(
        [
            "Missing credentials. Set these environment variables:",
            "  BITBUCKET_EMAIL     - Your Atlassian account email",
            "  BITBUCKET_API_TOKEN - Your Bitbucket API token",
            "",
            f"Create an API token at: {API_TOKEN_URL}",
        ]
    )
