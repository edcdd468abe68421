import base64
import re
from typing import Any

import yaml

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def decode_content(content: str) -> str:
    """Decode the base64 payload of a GitHub content file to text."""
    return base64.b64decode(content).decode("utf-8")


def split_front_matter(markdown: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into its YAML front matter and its body.

    The front matter is the block between a leading `---` line and the next `---` line. Documents without front
    matter return an empty header and the full text as the body.

    Raises:
        yaml.YAMLError: If the front matter is not valid YAML.
    """

    match = FRONT_MATTER_PATTERN.match(markdown)
    if not match:
        return {}, markdown

    header: Any = yaml.safe_load(match.group("header"))  # pyright: ignore[reportAny]

    if not isinstance(header, dict):
        header = {}

    return header, markdown[match.end() :]  # pyright: ignore[reportUnknownVariableType]
