from collections.abc import Sequence

from blog_content_mcp.clients.models.github import ContentType, Lang


def build_qualifier_path(directory: str, enabled: bool = True, lang: Lang | None = None) -> str:
    """Build the `path:` qualifier restricting a code search to a content directory, optionally to one language.

    Returns an empty qualifier when disabled."""

    if not enabled:
        return ""

    return f"path:_{directory}/{lang}" if lang else f"path:_{directory}"


def join_qualifiers(qualifiers: Sequence[str]) -> str:
    return " ".join([qualifier for qualifier in qualifiers if qualifier])


def build_search_query(query: str, owner: str, repo: str, lang: Lang | None = None, content_type: ContentType | None = None) -> str:
    """Build a code search query over the markdown contents of the blog repository."""

    qualifiers: list[str] = [
        f"repo:{owner}/{repo}",
        "extension:md",
        build_qualifier_path(
            directory="articles",
            enabled=content_type is None or content_type == ContentType.ARTICLE,
            lang=lang,
        ),
        build_qualifier_path(
            directory="tutorials",
            enabled=content_type is None or content_type == ContentType.TUTORIAL,
            lang=lang,
        ),
    ]

    return f"{query} {join_qualifiers(qualifiers)}".strip()
