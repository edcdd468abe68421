import os

from fastmcp.utilities.logging import get_logger
from openai import AsyncOpenAI

logger = get_logger(__name__)

OPEN_ROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "x-ai/grok-4-fast:free"


def get_model() -> str:
    return os.getenv("QUIZ_MODEL") or DEFAULT_MODEL


def get_generation_client() -> AsyncOpenAI | None:
    """Build the client used to generate structured content, preferring OpenRouter over OpenAI."""

    if api_key := os.getenv("OPEN_ROUTER_API_KEY"):
        headers: dict[str, str] = {}
        if app_url := os.getenv("OPEN_ROUTER_APP_URL"):
            headers["HTTP-Referer"] = app_url
        if app_name := os.getenv("OPEN_ROUTER_APP_NAME"):
            headers["X-Title"] = app_name

        return AsyncOpenAI(api_key=api_key, base_url=OPEN_ROUTER_BASE_URL, default_headers=headers)

    if api_key := os.getenv("OPENAI_API_KEY"):
        return AsyncOpenAI(api_key=api_key, base_url=os.getenv("OPENAI_BASE_URL"))

    logger.warning(
        msg=(
            "No generation client found, quiz generation requests will fail. "
            "Set OPEN_ROUTER_API_KEY or OPENAI_API_KEY to enable quiz generation. "
        )
    )

    return None
