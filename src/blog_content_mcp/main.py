import os
from logging import Logger
from typing import Literal

import click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.utilities.logging import configure_logging, get_logger

from blog_content_mcp.clients.github import GitHubBlogClient
from blog_content_mcp.servers.agents import AgentServer
from blog_content_mcp.servers.content import ContentServer
from blog_content_mcp.servers.quiz import QuizServer

configure_logging(level=os.getenv("LOG_LEVEL", "INFO").upper())  # pyright: ignore[reportArgumentType]

logger: Logger = get_logger(name=__name__)

enable_quiz: bool = not bool(os.getenv("DISABLE_QUIZ"))


def new_mcp_server(blog_client: GitHubBlogClient | None = None, enable_quiz: bool = enable_quiz) -> FastMCP[None]:
    mcp: FastMCP[None] = FastMCP[None](name="Blog Content MCP")

    mcp.add_middleware(middleware=LoggingMiddleware(include_payloads=True, logger=logger))

    content_server: ContentServer = ContentServer(blog_client=blog_client or GitHubBlogClient(), logger=logger)
    _ = content_server.register_tools(fastmcp=mcp)

    agent_server: AgentServer = AgentServer(logger=logger)
    _ = agent_server.register_prompts(fastmcp=mcp)

    if enable_quiz:
        quiz_server: QuizServer = QuizServer(content_server=content_server, logger=logger)
        _ = quiz_server.register_tools(fastmcp=mcp)

    return mcp


mcp: FastMCP[None] = new_mcp_server()


@click.command()
@click.option(
    "--mcp-transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default="stdio",
    help="The transport to run the MCP server on",
)
def run_mcp(mcp_transport: Literal["stdio", "streamable-http"]):
    mcp.run(transport=mcp_transport)


if __name__ == "__main__":
    run_mcp()
