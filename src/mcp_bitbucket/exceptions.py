class MCPBitbucketError(Exception):
    """Base exception for MCP-Bitbucket errors."""

    pass


class MissingCredentialsError(MCPBitbucketError, ValueError):
    """Raised at startup when the Bitbucket email or API token is not set."""

    pass


class MissingWorkspaceError(MCPBitbucketError, ValueError):
    """Raised when no workspace is given and no default is configured."""

    pass


class ToolArgumentError(MCPBitbucketError, ValueError):
    """Raised when a tool call carries arguments that do not match its schema."""

    pass


class BitbucketApiError(MCPBitbucketError):
    """Raised when the Bitbucket API answers with a non-success status."""

    def __init__(
        self, status_code: int, status_text: str, body: str, context: str
    ) -> None:
        super().__init__(f"Bitbucket API {status_code}: {status_text}")
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        self.context = context

    @property
    def user_message(self) -> str:
        """Readable explanation of the failure for the tool caller."""
        from .utils.errors import format_user_message

        return format_user_message(self.status_code, self.body, self.context)
