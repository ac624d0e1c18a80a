import asyncio
import logging
import os
import sys

import click
from dotenv import load_dotenv

__version__ = "0.1.0"

from .logging_config import log_operation, setup_logger

logger = logging.getLogger("mcp-bitbucket")


@click.command()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    help="Transport type (stdio or sse)",
)
@click.option(
    "--port",
    default=8000,
    help="Port to listen on for SSE transport",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option("--bitbucket-email", help="Atlassian account email")
@click.option("--bitbucket-token", help="Bitbucket API token")
@click.option("--bitbucket-workspace", help="Default Bitbucket workspace slug")
@click.option(
    "--bitbucket-url",
    help="Bitbucket API base URL (default: https://api.bitbucket.org/2.0)",
)
@click.option(
    "--read-only",
    is_flag=True,
    default=False,
    help="Hide and refuse tools that modify pull requests",
)
def main(
    verbose: int,
    env_file: str | None,
    transport: str,
    port: int,
    log_to_file: bool,
    log_dir: str | None,
    bitbucket_email: str | None,
    bitbucket_token: str | None,
    bitbucket_workspace: str | None,
    bitbucket_url: str | None,
    read_only: bool,
) -> None:
    """MCP Bitbucket Server - pull request review tools for Bitbucket Cloud."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    logging_level = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    setup_logger(level=logging_level, log_to_file=log_to_file, log_dir=log_dir)

    with log_operation(logger, "application_startup", app_version=__version__):
        if env_file:
            logger.info(f"Loaded environment from file: {env_file}")

        # Command line values override the environment
        if bitbucket_email:
            os.environ["BITBUCKET_EMAIL"] = bitbucket_email
        if bitbucket_token:
            os.environ["BITBUCKET_API_TOKEN"] = bitbucket_token
        if bitbucket_workspace:
            os.environ["BITBUCKET_WORKSPACE"] = bitbucket_workspace
        if bitbucket_url:
            os.environ["BITBUCKET_API_BASE_URL"] = bitbucket_url
        if read_only:
            os.environ["READ_ONLY_MODE"] = "true"

        from .bitbucket.config import missing_credentials_message

        if not os.getenv("BITBUCKET_EMAIL") or not os.getenv("BITBUCKET_API_TOKEN"):
            logger.error(missing_credentials_message())
            sys.exit(1)

        from . import server

        logger.info(f"Starting MCP Bitbucket v{__version__} with {transport} transport")

    asyncio.run(server.run_server(transport=transport, port=port))


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
