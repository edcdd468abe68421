import asyncio
import base64
import hashlib
import json
from collections.abc import AsyncGenerator, Sequence
from typing import Any, overload
from urllib.parse import unquote

import httpx
import pytest
import yaml
from fastmcp import FastMCP
from fastmcp.client.client import CallToolResult
from fastmcp.server.middleware.logging import LoggingMiddleware
from githubkit import GitHub as GitHubKit
from openai import AsyncOpenAI
from pydantic import BaseModel

from blog_content_mcp.clients.github import GitHubBlogClient

BLOG_OWNER = "eleven-labs"
BLOG_REPO = "blog.eleven-labs.com"
BLOG_HOST = "blog.eleven-labs.com"

LLM_BASE_URL = "https://llm.test/v1"
LLM_MODEL = "test-model"


def markdown_file(front_matter: dict[str, Any], body: str) -> str:
    return f"---\n{yaml.safe_dump(front_matter, sort_keys=False)}---\n{body}"


def article_front_matter(lang: str, date: str, slug: str, title: str) -> dict[str, Any]:
    return {
        "contentType": "article",
        "lang": lang,
        "date": date,
        "slug": slug,
        "title": title,
        "excerpt": f"All about {title}.",
        "categories": ["javascript"],
        "authors": ["jdoe"],
    }


def tutorial_front_matter(lang: str, date: str, slug: str, title: str, steps: list[str]) -> dict[str, Any]:
    return {
        "contentType": "tutorial",
        "lang": lang,
        "date": date,
        "slug": slug,
        "title": title,
        "excerpt": f"Learn {title}.",
        "categories": ["javascript"],
        "authors": ["jdoe"],
        "cover": {"path": "/imgs/tutorials/cover.png"},
        "steps": steps,
    }


GITHUB_API_URL = "https://api.github.com"
REPOSITORY_API_URL = f"{GITHUB_API_URL}/repos/{BLOG_OWNER}/{BLOG_REPO}"
REPOSITORY_HTML_URL = f"https://github.com/{BLOG_OWNER}/{BLOG_REPO}"

OWNER_URL_NAMES = [
    "followers", "following", "gists", "starred", "subscriptions", "organizations", "repos", "events", "received_events",
]  # fmt: skip

REPOSITORY_URL_NAMES = [
    "archive", "assignees", "blobs", "branches", "collaborators", "comments", "commits", "compare", "contents",
    "contributors", "deployments", "downloads", "events", "forks", "git_commits", "git_refs", "git_tags",
    "issue_comment", "issue_events", "issues", "keys", "labels", "languages", "merges", "milestones", "notifications",
    "pulls", "releases", "stargazers", "statuses", "subscribers", "subscription", "tags", "teams", "trees", "hooks",
]  # fmt: skip


def repository_payload() -> dict[str, Any]:
    owner_url = f"{GITHUB_API_URL}/users/{BLOG_OWNER}"

    owner: dict[str, Any] = {
        "login": BLOG_OWNER,
        "id": 1,
        "node_id": "O_1",
        "avatar_url": "https://avatars.githubusercontent.com/u/1?v=4",
        "gravatar_id": "",
        "url": owner_url,
        "html_url": f"https://github.com/{BLOG_OWNER}",
        "type": "Organization",
        "site_admin": False,
        **{f"{name}_url": f"{owner_url}/{name}" for name in OWNER_URL_NAMES},
    }

    return {
        "id": 2,
        "node_id": "R_2",
        "name": BLOG_REPO,
        "full_name": f"{BLOG_OWNER}/{BLOG_REPO}",
        "owner": owner,
        "private": False,
        "html_url": REPOSITORY_HTML_URL,
        "description": None,
        "fork": False,
        "url": REPOSITORY_API_URL,
        **{f"{name}_url": f"{REPOSITORY_API_URL}/{name}" for name in REPOSITORY_URL_NAMES},
    }


def content_payload(path: str, data: bytes | None = None) -> dict[str, Any]:
    """A contents API entry: a file when `data` is given, a directory otherwise."""

    is_file = data is not None
    sha = hashlib.sha1(path.encode("utf-8")).hexdigest()  # noqa: S324

    url = f"{REPOSITORY_API_URL}/contents/{path}"
    git_url = f"{REPOSITORY_API_URL}/git/{'blobs' if is_file else 'trees'}/{sha}"
    html_url = f"{REPOSITORY_HTML_URL}/{'blob' if is_file else 'tree'}/main/{path}"

    payload: dict[str, Any] = {
        "type": "file" if is_file else "dir",
        "size": len(data) if data is not None else 0,
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": sha,
        "url": url,
        "git_url": git_url,
        "html_url": html_url,
        "download_url": f"https://raw.githubusercontent.com/{BLOG_OWNER}/{BLOG_REPO}/main/{path}" if is_file else None,
        "_links": {"git": git_url, "html": html_url, "self": url},
    }

    if data is not None:
        payload["encoding"] = "base64"
        payload["content"] = base64.b64encode(data).decode("ascii")

    return payload


def search_item_payload(path: str) -> dict[str, Any]:
    entry = content_payload(path=path, data=b"")

    return {
        "name": entry["name"],
        "path": path,
        "sha": entry["sha"],
        "url": entry["url"],
        "git_url": entry["git_url"],
        "html_url": entry["html_url"],
        "repository": repository_payload(),
        "score": 1.0,
    }


class FakeBlogRepository:
    """An in-memory blog repository served through the contents and code search endpoints of the GitHub REST API."""

    files: dict[str, bytes]
    search_results: list[str]
    delays: dict[str, float]
    failing_paths: set[str]
    requests: list[httpx.Request]

    def __init__(self):
        self.files = {}
        self.search_results = []
        self.delays = {}
        self.failing_paths = set()
        self.requests = []

    def add_file(self, path: str, text: str | bytes) -> None:
        self.files[path] = text.encode("utf-8") if isinstance(text, str) else text

    def add_article(self, lang: str, date: str, slug: str, title: str, body: str) -> str:
        path = f"_articles/{lang}/{date}-{slug}.md"
        self.add_file(path, markdown_file(article_front_matter(lang, date, slug, title), body))
        return path

    def add_tutorial(self, lang: str, date: str, slug: str, title: str, steps: dict[str, str]) -> str:
        root = f"_tutorials/{lang}/{date}-{slug}/"
        front_matter = tutorial_front_matter(lang, date, slug, title, list(steps))
        self.add_file(f"{root}index.md", markdown_file(front_matter, f"# {title}\n"))
        for step, body in steps.items():
            self.add_file(f"{root}steps/{step}.md", markdown_file(front_matter, body))
        return root

    @property
    def search_queries(self) -> list[str]:
        return [str(request.url.params["q"]) for request in self.requests if request.url.path == "/search/code"]

    def _list_directory(self, path: str) -> list[dict[str, Any]]:
        entries: dict[str, dict[str, Any]] = {}
        prefix = f"{path}/"

        for file_path, data in self.files.items():
            if not file_path.startswith(prefix):
                continue

            name, _, rest = file_path[len(prefix) :].partition("/")
            _ = entries.setdefault(name, content_payload(path=f"{prefix}{name}", data=None if rest else data))

        # Directory listings do not carry the file contents.
        return [{key: value for key, value in entry.items() if key not in ("encoding", "content")} for entry in entries.values()]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/search/code":
            items = [search_item_payload(path=path) for path in self.search_results]
            return httpx.Response(200, json={"total_count": len(items), "incomplete_results": False, "items": items})

        contents_prefix = f"/repos/{BLOG_OWNER}/{BLOG_REPO}/contents/"
        if not request.url.path.startswith(contents_prefix):
            return httpx.Response(404, json={"message": "Not Found"})

        path = unquote(request.url.path[len(contents_prefix) :])

        if delay := self.delays.get(path):
            await asyncio.sleep(delay)

        if path in self.failing_paths:
            return httpx.Response(500, json={"message": "Server Error"})

        if path in self.files:
            return httpx.Response(200, json=content_payload(path=path, data=self.files[path]))

        if entries := self._list_directory(path):
            return httpx.Response(200, json=entries)

        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def blog_repository() -> FakeBlogRepository:
    blog_repository = FakeBlogRepository()

    _ = blog_repository.add_article(
        lang="fr", date="2024-05-12", slug="hello-zod", title="Hello Zod", body="# Hello Zod\n\nZod valide vos schémas.\n"
    )
    _ = blog_repository.add_article(
        lang="en", date="2024-07-01", slug="mcp-server", title="Build an MCP server", body="# MCP\n\nServe tools to agents.\n"
    )
    _ = blog_repository.add_article(
        lang="fr", date="2023-01-15", slug="old-post", title="Un vieil article", body="Il était une fois.\n"
    )
    _ = blog_repository.add_tutorial(
        lang="fr",
        date="2024-06-01",
        slug="react-tuto",
        title="Tutoriel React",
        steps={"setup": "A", "usage": "B"},
    )

    return blog_repository


def new_githubkit_client(transport: httpx.AsyncBaseTransport) -> GitHubKit[Any]:
    return GitHubKit(async_transport=transport, http_cache=False, auto_retry=False)


@pytest.fixture
def githubkit_client(blog_repository: FakeBlogRepository) -> GitHubKit[Any]:
    return new_githubkit_client(transport=httpx.MockTransport(blog_repository.handle))


@pytest.fixture
def blog_client(githubkit_client: GitHubKit[Any]) -> GitHubBlogClient:
    return GitHubBlogClient(githubkit_client=githubkit_client, owner=BLOG_OWNER, repo=BLOG_REPO, host=BLOG_HOST)


class FakeCompletions:
    """Answers chat completion requests with canned responses, in order."""

    responses: list[str]
    requests: list[dict[str, Any]]

    def __init__(self, responses: Sequence[str] | None = None):
        self.responses = list(responses or [])
        self.requests = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        body: dict[str, Any] = json.loads(request.content)
        self.requests.append(body)

        text = self.responses.pop(0)

        return httpx.Response(
            200,
            json={
                "id": f"chatcmpl-{len(self.requests)}",
                "object": "chat.completion",
                "created": 0,
                "model": body["model"],
                "choices": [{"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": text}}],
                "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
            },
        )


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions()


@pytest.fixture
async def generation_client(completions: FakeCompletions) -> AsyncGenerator[AsyncOpenAI, Any]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(completions.handle)) as http_client:
        yield AsyncOpenAI(api_key="test-key", base_url=LLM_BASE_URL, http_client=http_client, max_retries=0)


@pytest.fixture
def logging_middleware() -> LoggingMiddleware:
    return LoggingMiddleware(include_payloads=True)


@pytest.fixture
def fastmcp(logging_middleware: LoggingMiddleware) -> FastMCP[Any]:
    return FastMCP(name="Blog Content MCP", middleware=[logging_middleware])


def handle_exclude_keys(dictionary: dict[str, Any], exclude_keys: list[str] | None = None) -> dict[str, Any]:
    if exclude_keys is None:
        return dictionary
    return {key: value for key, value in dictionary.items() if key not in exclude_keys}


@overload
def dump_for_snapshot(
    basemodel: None,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> None: ...


@overload
def dump_for_snapshot(
    basemodel: BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any]: ...


def dump_for_snapshot(
    basemodel: None | BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return handle_exclude_keys(basemodel.model_dump(exclude_none=exclude_none, **dump_kwargs), exclude_keys)


def dump_list_for_snapshot(
    basemodel: None | Sequence[BaseModel],
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> list[dict[str, Any]]:
    if basemodel is None:
        return []

    return [dump_for_snapshot(item, exclude_keys, exclude_none, **dump_kwargs) for item in basemodel]


def dump_structured_content_for_snapshot(call_tool_result: CallToolResult, /) -> dict[str, Any]:
    assert call_tool_result.structured_content is not None
    return call_tool_result.structured_content
