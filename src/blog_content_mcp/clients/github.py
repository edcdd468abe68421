import asyncio
import binascii
import os
from collections.abc import Awaitable, Callable, Sequence
from logging import Logger, getLogger
from typing import Any, Literal, overload

import yaml
from githubkit import GitHub as GitHubKit
from githubkit.auth.token import TokenAuthStrategy
from githubkit.auth.unauth import UnauthAuthStrategy
from githubkit.exception import GitHubException as GitHubKitGitHubException
from githubkit.exception import RequestFailed as GitHubKitRequestFailed
from githubkit.response import Response as GitHubKitResponse
from githubkit.versions.latest.models import ContentDirectoryItems as GitHubKitContentDirectoryItems
from githubkit.versions.latest.models import ContentFile as GitHubKitContentFile
from pydantic import BaseModel, ValidationError

from blog_content_mcp.clients.errors.github import RequestError, ResourceNotFoundError, ResourceTypeMismatchError
from blog_content_mcp.clients.models.github import (
    DEFAULT_BLOG_HOST,
    ContentMeta,
    ContentMetaExtended,
    ContentType,
    ContentWithMetaData,
    Lang,
)
from blog_content_mcp.models.query.code import build_search_query
from blog_content_mcp.utilities.markdown import decode_content, split_front_matter

NOT_FOUND_ERROR = 404

GITHUBKIT_RESPONSE_TYPE = BaseModel | Sequence[BaseModel]

DEFAULT_BLOG_OWNER = "eleven-labs"
DEFAULT_BLOG_REPO = "blog.eleven-labs.com"

TUTORIAL_STEPS_SEPARATOR = "\n\n---\n\n"

CONTENT_DIRECTORIES: dict[ContentType, tuple[str, Literal["file", "dir"]]] = {
    ContentType.ARTICLE: ("_articles", "file"),
    ContentType.TUTORIAL: ("_tutorials", "dir"),
}


def extract_response[T: GITHUBKIT_RESPONSE_TYPE](response: GitHubKitResponse[T], /) -> T:
    """Extract the response from a response."""

    return response.parsed_data


def get_github_token() -> str | None:
    env_vars: list[str] = ["GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN"]
    for env_var in env_vars:
        if env_var in os.environ:
            return os.environ[env_var]
    return None


def get_githubkit_client(token: str | None = None) -> GitHubKit[Any]:
    # Failed requests are reported as they are, never retried.
    if token := token or get_github_token():
        return GitHubKit[TokenAuthStrategy](auth=TokenAuthStrategy(token=token), auto_retry=False)

    getLogger(__name__).warning("GITHUB_TOKEN is not set, requests to the GitHub API will be anonymous and code search will fail.")

    return GitHubKit[UnauthAuthStrategy](auth=UnauthAuthStrategy(), auto_retry=False)


class GitHubBlogClient:
    """Lists, searches and loads the markdown contents (articles and tutorials) of a GitHub-hosted blog."""

    githubkit_client: GitHubKit[Any]
    logger: Logger

    owner: str
    repo: str
    host: str

    log_requests: bool
    log_responses: bool
    log_on_error: bool

    def __init__(
        self,
        githubkit_client: GitHubKit[Any] | None = None,
        logger: Logger | None = None,
        owner: str | None = None,
        repo: str | None = None,
        host: str | None = None,
        log_requests: bool = True,
        log_responses: bool = False,
        log_on_error: bool = True,
    ):
        self.githubkit_client = githubkit_client or get_githubkit_client()
        self.logger = logger or getLogger(__name__)
        self.owner = owner or os.getenv("BLOG_REPOSITORY_OWNER") or DEFAULT_BLOG_OWNER
        self.repo = repo or os.getenv("BLOG_REPOSITORY_NAME") or DEFAULT_BLOG_REPO
        self.host = host or os.getenv("BLOG_HOST") or DEFAULT_BLOG_HOST
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_on_error = log_on_error

    def _get_loggers(
        self, log_request: bool | None = None, log_response: bool | None = None, log_on_error: bool | None = None
    ) -> tuple[Callable[[str], Any], Callable[[str], Any], Callable[[str], Any]]:
        request_logger = self.logger.info if log_request or self.log_requests else self.logger.debug
        response_logger = self.logger.info if log_response or self.log_responses else self.logger.debug
        error_logger = self.logger.exception if log_on_error or self.log_on_error else self.logger.debug
        return request_logger, response_logger, error_logger

    def _get_metadata(self, path: str) -> ContentMeta | None:
        return ContentMeta.from_path(path=path, host=self.host)

    @overload
    async def _perform_rest_request[T: GITHUBKIT_RESPONSE_TYPE](
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[False] = False,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[T]]],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T | None: ...

    @overload
    async def _perform_rest_request[T: GITHUBKIT_RESPONSE_TYPE](
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[True] = True,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[T]]],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T: ...

    async def _perform_rest_request[T: GITHUBKIT_RESPONSE_TYPE](
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: bool | None = None,
        *,
        method: Callable[..., Awaitable[GitHubKitResponse[T]]],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T | None:
        """Perform a request and extract the response.

        Args:
            action: The action being performed.
            log_request: Whether to log the request.
            log_response: Whether to log the response.
            log_on_error: Whether to log on error.
            error_on_not_found: Whether to raise an error if the resource is not found.

        Raises:
            ResourceNotFoundError: If the resource is not found and error_on_not_found is True.
            RequestError: If the request fails.
        """

        request_logger, response_logger, error_logger = self._get_loggers(
            log_request=log_request, log_response=log_response, log_on_error=log_on_error
        )

        request_logger(f"Performing {action} using {method.__name__} with kwargs {request_args}")

        try:
            response: GitHubKitResponse[T] = await method(**request_args)
        except GitHubKitRequestFailed as e:
            if e.response.status_code == NOT_FOUND_ERROR:
                if error_on_not_found:
                    raise ResourceNotFoundError(action=action, resource=e.request.url.path) from e

                self.logger.debug(f"{action} using {method.__name__} with kwargs {request_args} returned not found.")

                return None

            error_logger(f"RequestFailed error performing {action} using {method.__name__} with kwargs {request_args}: {e}")

            raise RequestError(action=action, message=str(e)) from e
        except GitHubKitGitHubException as e:
            error_logger(f"Error performing {action} using {method.__name__} with kwargs {request_args}: {e}")

            raise RequestError(action=action, message=str(e)) from e

        extracted_response = extract_response(response)

        response_logger(f"Extracted response for {action} using {method.__name__} with kwargs {request_args}: {extracted_response}")

        return extracted_response

    async def list_directory(self, path: str, entry_type: Literal["file", "dir"] = "file") -> list[GitHubKitContentDirectoryItems]:
        """List the files (or sub-directories) of a directory. A missing directory lists as empty."""

        response = await self._perform_rest_request(
            action="List directory",
            method=self.githubkit_client.rest.repos.async_get_content,
            owner=self.owner,
            repo=self.repo,
            path=path.strip("/"),
        )

        if not isinstance(response, list):
            return []

        return [entry for entry in response if entry.type == entry_type]

    @overload
    async def get_file(self, path: str, error_on_not_found: Literal[False] = False) -> GitHubKitContentFile | None: ...

    @overload
    async def get_file(self, path: str, error_on_not_found: Literal[True] = True) -> GitHubKitContentFile: ...

    async def get_file(self, path: str, error_on_not_found: bool = False) -> GitHubKitContentFile | None:
        """Get a file of the blog repository, with its base64 encoded content.

        Args:
            path: The path of the file.
            error_on_not_found: Whether to raise an error if the file is not found.
        """

        if file := await self._perform_rest_request(
            action="Get file",
            error_on_not_found=error_on_not_found,
            method=self.githubkit_client.rest.repos.async_get_content,
            owner=self.owner,
            repo=self.repo,
            path=path.strip("/"),
        ):
            if isinstance(file, list):
                raise ResourceTypeMismatchError(action="Get file", resource=path, expected_type="file", actual_type="directory")

            if not isinstance(file, GitHubKitContentFile):
                raise ResourceTypeMismatchError(action="Get file", resource=path, expected_type="file", actual_type=file.type)

            return file

        return None

    async def _get_content_file_with_metadata(self, path: str) -> ContentWithMetaData | None:
        """Load a markdown file and validate its front matter. Missing, undecodable or invalid files are logged and return None."""

        file: GitHubKitContentFile | None = await self.get_file(path=path)

        if file is None:
            self.logger.warning(f"Content file {path} could not be found.")
            return None

        try:
            markdown = decode_content(file.content)
        except (binascii.Error, UnicodeDecodeError) as e:
            self.logger.warning(f"Content file {path} could not be decoded: {e}")
            return None

        try:
            front_matter, body = split_front_matter(markdown)
            meta_data = ContentMetaExtended.model_validate(front_matter)
        except (ValidationError, yaml.YAMLError) as e:
            self.logger.warning(f"Content file {path} has invalid front matter: {e}")
            return None

        return ContentWithMetaData(meta_data=meta_data, content=body)

    async def _list_contents_of_type(self, content_type: ContentType) -> list[ContentMeta]:
        directory, entry_type = CONTENT_DIRECTORIES[content_type]

        listings: list[list[GitHubKitContentDirectoryItems]] = await asyncio.gather(
            *[self.list_directory(path=f"{directory}/{lang}", entry_type=entry_type) for lang in Lang]
        )

        return [metadata for entries in listings for entry in entries if (metadata := self._get_metadata(entry.path))]

    async def list_contents(self, lang: Lang | None = None, content_type: ContentType | None = None) -> list[ContentMeta]:
        """List the contents (articles and tutorials), most recent first.

        Args:
            lang: Only return contents in this language.
            content_type: Only return contents of this type.
        """

        content_types: list[ContentType] = [content_type] if content_type else list(ContentType)

        listings: list[list[ContentMeta]] = await asyncio.gather(
            *[self._list_contents_of_type(content_type=needed_type) for needed_type in content_types]
        )

        contents: list[ContentMeta] = [metadata for listing in listings for metadata in listing]

        if lang:
            contents = [metadata for metadata in contents if metadata.lang == lang]

        # Stable: contents published on the same day keep the listing order.
        return sorted(contents, key=lambda metadata: metadata.date, reverse=True)

    async def search_contents(self, query: str, lang: Lang | None = None, content_type: ContentType | None = None) -> list[ContentMeta]:
        """Full-text search over the markdown contents, one result per article or tutorial.

        Args:
            query: A free search query (keywords).
            lang: Only search contents in this language.
            content_type: Only search contents of this type.
        """

        response = await self._perform_rest_request(
            action="Search contents",
            error_on_not_found=True,
            method=self.githubkit_client.rest.search.async_code,
            q=build_search_query(query=query, owner=self.owner, repo=self.repo, lang=lang, content_type=content_type),
        )

        results: dict[str, ContentMeta] = {}

        for item in response.items:
            metadata = self._get_metadata(item.path)
            if metadata is None:
                continue

            key = f"{metadata.content_type}{metadata.slug}".lower()
            if key not in results:
                results[key] = metadata.model_copy(update={"step": None})

        return list(results.values())

    async def get_content_with_metadata(self, path: str) -> ContentWithMetaData | None:
        """Get the markdown content of an article, or the merged content of the steps of a tutorial, with its metadata.

        Returns None when the path is not a content path or the content could not be loaded."""

        metadata = self._get_metadata(path)
        if metadata is None:
            return None

        if metadata.content_type == ContentType.ARTICLE:
            return await self._get_content_file_with_metadata(metadata.path)

        tutorial = await self._get_content_file_with_metadata(f"{metadata.path}index.md")
        if tutorial is None or tutorial.meta_data.steps is None:
            return None

        steps: list[ContentWithMetaData | None] = await asyncio.gather(
            *[self._get_content_file_with_metadata(f"{metadata.path}steps/{step}.md") for step in tutorial.meta_data.steps]
        )

        content = TUTORIAL_STEPS_SEPARATOR.join([step.content for step in steps if step is not None and step.content])

        return ContentWithMetaData(meta_data=tutorial.meta_data, content=content)
