from typing import Annotated

from pydantic import Field

from blog_content_mcp.clients.models.github import ContentType, Lang
from blog_content_mcp.servers.models.quiz import Difficulty

LANG_DESCRIPTION = "Optional language filter ('fr' | 'en'). If omitted, include all languages."
LANG = Annotated[Lang | None, Field(description=LANG_DESCRIPTION)]

CONTENT_TYPE_DESCRIPTION = "Optional content type filter ('article' | 'tutorial'). If omitted, include all content types."
CONTENT_TYPE = Annotated[ContentType | None, Field(description=CONTENT_TYPE_DESCRIPTION)]

QUERY = Annotated[str, Field(min_length=1, description="Search query string (full-text over markdown).")]

PATH = Annotated[
    str,
    Field(
        description=(
            "Internal path of the target content, as returned by `list-contents` or `search-contents`. "
            "For example: `_articles/fr/2024-05-12-my-post.md` or `_tutorials/fr/2024-05-12-my-tuto/`."
        )
    ),
]

# Quiz Fields

NUMBER_OF_QUESTIONS = Annotated[
    int,
    Field(ge=5, le=20, description="Number of quiz questions to generate. Must be an integer between 5 and 20. Defaults to 10."),
]
DIFFICULTY = Annotated[Difficulty, Field(description="Difficulty level of the quiz: 'easy', 'medium', or 'hard'. Defaults to 'medium'.")]
