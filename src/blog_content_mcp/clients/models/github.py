import datetime
import re
from enum import StrEnum
from typing import Self

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

DEFAULT_BLOG_HOST = "blog.eleven-labs.com"

CONTENT_PATH_PATTERN = re.compile(
    r"^(?P<base>_(?P<directory>articles|tutorials)/(?P<lang>fr|en)/(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>[^/.]+))"
    r"(?:\.md|/steps/(?P<step>[^/]+)\.md|(?P<trailing_slash>/))?$"
)


class ContentType(StrEnum):
    """The type of a blog content."""

    ARTICLE = "article"
    TUTORIAL = "tutorial"


class Lang(StrEnum):
    """The language of a blog content."""

    FR = "fr"
    EN = "en"


class ContentStep(BaseModel):
    """A step of a tutorial."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(description="Slug identifier of the related step.")
    url: str = Field(description="Public URL of the related step.")


class ContentMeta(BaseModel):
    """Metadata for a blog content, derived from its path in the repository."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    content_type: ContentType = Field(description="Type of the content.")
    lang: Lang = Field(description="Language of the content.")
    path: str = Field(description="Internal path to the content resource.")
    url: str = Field(description="Public URL of the content.")
    slug: str = Field(description="Unique slug identifier for the content.")
    date: datetime.date = Field(description="Publication date.")
    step: ContentStep | None = Field(default=None, description="Optional metadata about a related step.")

    @classmethod
    def from_path(cls, path: str, host: str = DEFAULT_BLOG_HOST) -> Self | None:
        """Parse a repository path such as `_articles/fr/2024-05-12-my-post.md`, `_tutorials/fr/2024-05-12-my-tuto/`
        or `_tutorials/fr/2024-05-12-my-tuto/steps/my-step.md`.

        Returns None when the path is not a content path."""

        match = CONTENT_PATH_PATTERN.match(path)
        if not match:
            return None

        try:
            published = datetime.date.fromisoformat(match.group("date"))
        except ValueError:
            return None

        lang = Lang(match.group("lang"))
        slug = match.group("slug")
        url = f"https://{host}/{lang}/{slug}/"

        content_type = ContentType.TUTORIAL if match.group("directory") == "tutorials" else ContentType.ARTICLE

        # Only tutorials are directories.
        if content_type == ContentType.ARTICLE and match.group("trailing_slash"):
            return None

        suffix = ".md" if content_type == ContentType.ARTICLE else "/"

        step: ContentStep | None = None
        if step_slug := match.group("step"):
            step = ContentStep(slug=step_slug, url=f"{url}{step_slug}")

        return cls(
            content_type=content_type,
            lang=lang,
            path=match.group("base") + suffix,
            url=url,
            slug=slug,
            date=published,
            step=step,
        )


def get_metadata_by_path(path: str, host: str = DEFAULT_BLOG_HOST) -> ContentMeta | None:
    """Get the metadata of a file or directory path of the blog repository, or None if it is not a content path."""
    return ContentMeta.from_path(path=path, host=host)


class ContentCover(BaseModel):
    """The cover image of a blog content."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(pattern=r"^/\S+$", description="Path to the cover image file, starting with '/'.")


class ContentMetaExtended(BaseModel):
    """Metadata of a blog content, read from the front matter of its markdown file."""

    model_config = ConfigDict(frozen=True)

    content_type: ContentType = Field(
        validation_alias=AliasChoices("contentType", "content_type"),
        description="Type of the content.",
    )
    lang: Lang = Field(description="Language of the content.")
    date: datetime.date = Field(description="Publication date.")
    slug: str = Field(description="Unique slug identifier for the content.")
    title: str = Field(min_length=1, description="Title of the content.")
    excerpt: str = Field(min_length=1, description="Short summary or introduction of the content.")
    categories: list[str] = Field(min_length=1, description="List of categories associated with the content.")
    authors: list[str] = Field(min_length=1, description="List of authors of the content.")
    cover: ContentCover | None = Field(default=None, description="Cover image metadata.")
    steps: list[str] | None = Field(default=None, description="List of step identifiers (only for tutorials).")

    @model_validator(mode="after")
    def validate_non_empty_items(self) -> Self:
        for field_name in ("categories", "authors", "steps"):
            values: list[str] | None = getattr(self, field_name)
            if values and any(not value for value in values):
                msg = f"'{field_name}' must not contain empty values"
                raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_steps(self) -> Self:
        if self.content_type == ContentType.TUTORIAL and self.steps is None:
            msg = "Steps are required when contentType is 'tutorial'"
            raise ValueError(msg)

        if self.content_type != ContentType.TUTORIAL and self.steps is not None:
            msg = "Steps should only be present if contentType is 'tutorial'"
            raise ValueError(msg)

        return self


class ContentWithMetaData(BaseModel):
    """The markdown body of a blog content along with its metadata."""

    meta_data: ContentMetaExtended = Field(description="Metadata of the content.")
    content: str = Field(description="Raw markdown content. For tutorials, the merged content of all the steps.")
