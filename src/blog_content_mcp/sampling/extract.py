import json
from textwrap import dedent
from typing import Any

from pydantic import BaseModel, TypeAdapter

ALLOWED_TYPES = BaseModel | list[BaseModel]


def object_in_text_instructions[T: ALLOWED_TYPES](object_type: type[T]) -> str:
    """Return instructions asking the model to answer with a single JSON object of the given type."""

    type_adapter: TypeAdapter[T] = TypeAdapter[T](object_type)
    json_schema: dict[str, Any] = type_adapter.json_schema()

    return dedent(
        f"""
The only valid response to this request is a structured object of type {object_type.__name__}.

The schema for the object is:
```json
{json.dumps(obj=json_schema, indent=1)}
```

Respond ONLY with the JSON object: no comments and no text before or after it.

You must ensure you close any JSON tags, including arrays, objects, and strings and that
you do not leave trailing commas or other invalid JSON."""
    ).strip()


def extract_json_blocks_from_text(text: str) -> list[str]:
    """Extract all fenced (```) blocks from a text string."""

    lines = text.strip().split("\n")

    start_index: int | None = None

    matches: list[str] = []

    for i, line in enumerate(lines):
        if not line.startswith("```"):
            continue

        if start_index is None:
            start_index = i + 1
        else:
            matches.append("\n".join(lines[start_index:i]))
            start_index = None

    return matches


def extract_single_object_from_text[T: ALLOWED_TYPES](text: str, object_type: type[T]) -> T:
    """Extract an object from a text string, either a bare JSON document or a single Markdown JSON block.

    For example:
    ```json
    {
        "name": "John",
        "age": 30
    }
    ```

    Raises:
        ValueError: If the text contains more than one Markdown JSON block.
        pydantic.ValidationError: If the JSON does not validate against the object type.
    """

    type_adapter: TypeAdapter[T] = TypeAdapter[T](object_type)

    matches: list[str] = extract_json_blocks_from_text(text)

    if len(matches) > 1:
        msg = f"Text must contain at most one Markdown JSON block. Received {text}."
        raise ValueError(msg)

    json_text: str = matches[0] if matches else text.strip()

    return type_adapter.validate_json(json_text)
