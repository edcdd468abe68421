from collections.abc import Sequence
from typing import Literal

from fastmcp.utilities.logging import get_logger
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion, ChatCompletionMessageParam

from blog_content_mcp.sampling.extract import (
    ALLOWED_TYPES,
    extract_single_object_from_text,
    object_in_text_instructions,
)

logger = get_logger(__name__)


def estimate_tokens(text: str) -> int:
    """Estimate the number of tokens for a given text."""
    return len(text) // 4


def get_sampling_tokens(system_prompt: str, messages: Sequence[ChatCompletionMessageParam]) -> int:
    """Get the size of a sampling request."""

    return estimate_tokens(system_prompt) + sum(estimate_tokens(str(message.get("content") or "")) for message in messages)


def new_sampling_message(role: Literal["user", "assistant"], content: str | list[str]) -> ChatCompletionMessageParam:
    if isinstance(content, list):
        content = "\n".join(content)

    if role == "assistant":
        return {"role": "assistant", "content": content}

    return {"role": "user", "content": content}


def new_assistant_sampling_message(content: str | list[str]) -> ChatCompletionMessageParam:
    return new_sampling_message("assistant", content)


def new_user_sampling_message(content: str | list[str]) -> ChatCompletionMessageParam:
    return new_sampling_message("user", content)


class StructuredSamplingValidationError(Exception):
    """The model did not produce a valid structured response."""

    def __init__(self, message: str):
        super().__init__(message)


async def sample(
    client: AsyncOpenAI,
    model: str,
    system_prompt: str,
    messages: Sequence[ChatCompletionMessageParam],
    *,
    max_tokens: int = 4000,
    temperature: float = 0.0,
) -> tuple[str, ChatCompletionMessageParam]:
    """Sample a response from the model.

    Provides the text response as well as the assistant message for continuing the conversation.
    """

    logger.info(f"Sampling {model} with prompt that is {get_sampling_tokens(system_prompt, messages)} tokens.")

    completion: ChatCompletion = await client.chat.completions.create(
        model=model,
        messages=[{"role": "system", "content": system_prompt}, *messages],
        max_tokens=max_tokens,
        temperature=temperature,
    )

    if not completion.choices or not (text := completion.choices[0].message.content):
        msg = "The sampling call failed to generate a valid text response."
        raise TypeError(msg)

    logger.info(f"Sampling response was {estimate_tokens(text)} tokens.")

    return text, new_assistant_sampling_message(content=text)


async def structured_sample[T: ALLOWED_TYPES](
    client: AsyncOpenAI,
    model: str,
    system_prompt: str,
    messages: Sequence[ChatCompletionMessageParam],
    *,
    max_tokens: int = 4000,
    temperature: float = 0.0,
    response_model: type[T],
    retries: int = 3,
) -> tuple[T, ChatCompletionMessageParam]:
    """Sample a structured response from the model.

    Invalid responses are sent back to the model along with the validation error, up to `retries` times.

    Args:
        client: The client of the OpenAI-compatible API.
        model: The model to sample.
        system_prompt: The system prompt to use for the sampling.
        messages: The messages to use for the sampling.
        max_tokens: The maximum number of tokens to generate.
        temperature: The temperature to use for the sampling.
        response_model: The response model to use for the sampling.
        retries: The number of attempts before giving up.

    Returns:
        A tuple of the validated response and the assistant message.
    """

    extra_messages: list[ChatCompletionMessageParam] = [
        new_user_sampling_message(content=object_in_text_instructions(object_type=response_model)),
    ]

    for retry in range(retries):
        response, assistant_message = await sample(
            client=client,
            model=model,
            system_prompt=system_prompt,
            messages=[*messages, *extra_messages],
            max_tokens=max_tokens,
            temperature=temperature,
        )

        try:
            return extract_single_object_from_text(response, object_type=response_model), assistant_message
        except ValueError as e:
            msg = (
                f"The sampling call failed to generate a valid structured response (retry {retry + 1} of {retries}). Please try again: {e}"
            )
            logger.warning(msg)

            extra_messages.extend([assistant_message, new_user_sampling_message(content=msg)])

    raise StructuredSamplingValidationError(
        message=f"The sampling call failed to generate a valid structured response in {retries} retries."
    )
