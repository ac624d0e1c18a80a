"""MCP server exposing the Bitbucket Cloud pull request tools."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from .bitbucket import BitbucketConfig, BitbucketFetcher
from .exceptions import ToolArgumentError
from .logging_config import log_operation
from .tools import TOOLS, ToolSpec, get_tool
from .utils.io import get_enabled_tools, is_read_only_mode, should_include_tool
from .utils.logging import log_config_param

logger = logging.getLogger("mcp-bitbucket.server")

SERVER_NAME = "mcp-bitbucket"


@dataclass
class AppContext:
    """Application context for MCP Bitbucket."""

    bitbucket: BitbucketFetcher | None = None
    read_only: bool = False
    enabled_tools: list[str] | None = field(default=None)


@asynccontextmanager
async def server_lifespan(server: Server) -> AsyncIterator[AppContext]:
    """Create the Bitbucket fetcher for the server's lifetime and close it after.

    Raises:
        MissingCredentialsError: If BITBUCKET_EMAIL or BITBUCKET_API_TOKEN is unset
    """
    logger.info("Starting MCP Bitbucket server")

    read_only = is_read_only_mode()
    enabled_tools = get_enabled_tools()
    logger.info(f"Read-only mode: {'ENABLED' if read_only else 'DISABLED'}")
    logger.info(f"Enabled tools filter: {enabled_tools or 'All tools enabled'}")

    config = BitbucketConfig.from_env()
    log_config_param(logger, "Bitbucket", "URL", config.url)
    log_config_param(logger, "Bitbucket", "Email", config.email)
    log_config_param(logger, "Bitbucket", "API Token", config.api_token, sensitive=True)
    log_config_param(logger, "Bitbucket", "Default Workspace", config.workspace)
    log_config_param(logger, "Bitbucket", "SSL Verify", str(config.ssl_verify))

    bitbucket = BitbucketFetcher(config=config)
    logger.info("Bitbucket client initialized successfully.")

    try:
        yield AppContext(
            bitbucket=bitbucket, read_only=read_only, enabled_tools=enabled_tools
        )
    finally:
        await bitbucket.aclose()
        logger.info("MCP Bitbucket server shut down.")


app = Server(SERVER_NAME, lifespan=server_lifespan)


def _is_available(tool: ToolSpec, ctx: AppContext) -> bool:
    if not should_include_tool(tool.name, ctx.enabled_tools):
        return False
    return not (ctx.read_only and tool.is_write)


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List the Bitbucket tools available under the current configuration."""
    ctx: AppContext = app.request_context.lifespan_context
    tools = [
        Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.input_schema(),
        )
        for tool in TOOLS
        if _is_available(tool, ctx)
    ]
    logger.debug(f"Listing {len(tools)} tools: {[tool.name for tool in tools]}")
    return tools


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> Sequence[TextContent]:
    """Validate the arguments of a tool call and run it. Always answers with text."""
    ctx: AppContext = app.request_context.lifespan_context

    with log_operation(logger, f"tool:{name}"):
        tool = get_tool(name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {name}")
            return _text(f"Unknown tool: {name}")

        if not should_include_tool(name, ctx.enabled_tools):
            logger.warning(f"Tool '{name}' is not enabled")
            return _text(f"Tool '{name}' is not enabled on this server.")

        if ctx.read_only and tool.is_write:
            logger.warning(f"Attempted to call tool '{name}' in read-only mode.")
            action = name.removeprefix("bitbucket_").replace("_", " ")
            return _text(f"Cannot {action} in read-only mode.")

        if ctx.bitbucket is None:
            return _text("Bitbucket is not configured.")

        try:
            validated = tool.validate(arguments)
        except ToolArgumentError as e:
            logger.warning(f"Invalid arguments for {name}: {e}")
            return _text(f"Invalid arguments for {name}: {e}")

        return _text(await tool.handler(ctx.bitbucket, **validated))


async def run_server(transport: str = "stdio", port: int = 8000) -> None:
    """Run the MCP Bitbucket server with the specified transport."""
    if transport == "sse":
        import uvicorn
        from mcp.server.sse import SseServerTransport
        from starlette.applications import Starlette
        from starlette.requests import Request
        from starlette.responses import Response
        from starlette.routing import Mount, Route

        sse = SseServerTransport("/messages/")

        async def handle_sse(request: Request) -> Response:
            async with sse.connect_sse(
                request.scope, request.receive, request._send
            ) as streams:
                await app.run(
                    streams[0], streams[1], app.create_initialization_options()
                )
            return Response()

        starlette_app = Starlette(
            routes=[
                Route("/sse", endpoint=handle_sse),
                Mount("/messages/", app=sse.handle_post_message),
            ],
        )

        config = uvicorn.Config(starlette_app, host="0.0.0.0", port=port)  # noqa: S104
        server = uvicorn.Server(config)
        await server.serve()
    else:
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream, write_stream, app.create_initialization_options()
            )
