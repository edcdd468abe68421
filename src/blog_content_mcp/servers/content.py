from logging import Logger
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger

from blog_content_mcp.clients.github import GitHubBlogClient
from blog_content_mcp.clients.models.github import ContentMeta, ContentWithMetaData
from blog_content_mcp.servers.shared.annotations import CONTENT_TYPE, LANG, PATH, QUERY


class ContentServer:
    """Exposes the contents of the blog to agents."""

    blog_client: GitHubBlogClient
    logger: Logger

    def __init__(self, blog_client: GitHubBlogClient | None = None, logger: Logger | None = None):
        self.logger = logger or get_logger(name=__name__)
        self.blog_client = blog_client or GitHubBlogClient()

    def register_tools(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.list_contents, name="list-contents"))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.search_contents, name="search-contents"))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_content_with_metadata, name="get-content-with-metadata"))

        return fastmcp

    async def list_contents(self, lang: LANG = None, content_type: CONTENT_TYPE = None) -> list[ContentMeta]:
        """List blog contents (articles and tutorials), most recent first. If no filters are provided, results include all
        languages and content types."""

        return await self.blog_client.list_contents(lang=lang, content_type=content_type)

    async def search_contents(self, query: QUERY, lang: LANG = None, content_type: CONTENT_TYPE = None) -> list[ContentMeta]:
        """Search blog contents (markdown in articles/tutorials). If filters are omitted, search across all languages and
        content types."""

        return await self.blog_client.search_contents(query=query, lang=lang, content_type=content_type)

    async def get_content_with_metadata(self, path: PATH) -> ContentWithMetaData | None:
        """Fetches the full markdown content of an article or tutorial. For tutorials, returns the merged content of the steps,
        along with its metadata."""

        content: ContentWithMetaData | None = await self.blog_client.get_content_with_metadata(path=path)

        if content is None:
            self.logger.info(f"No content could be loaded for {path}.")

        return content
