"""Hosted extraction through OpenAI-compatible tool calling."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import openai as openai_sdk

from llmscrape import logger
from llmscrape.exceptions import ConfigurationError
from llmscrape.formatting import prepare_openai_page
from llmscrape.prompts import build_extraction_tool
from llmscrape.schemas import resolve_json_schema
from llmscrape.typing.models import CompletionResult, ExtractionOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from pydantic import BaseModel

    from llmscrape.settings import Settings
    from llmscrape.typing.models import JsonSchema, LoadedPage
    from llmscrape.typing.protocol import ChatCompletionClient


def build_openai_client(settings: Settings) -> openai_sdk.AsyncOpenAI:
    """Create an async OpenAI client bound to the settings' HTTPX client.

    Args:
        settings (Settings): Runtime settings.

    Raises:
        ConfigurationError: If no API key is configured.

    Returns:
        openai.AsyncOpenAI: Configured client.
    """
    if not settings.openai_api_key:
        raise ConfigurationError(setting="OPENAI_API_KEY", message="required for hosted extraction")
    return openai_sdk.AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        http_client=settings.httpx_client,
    )


def build_tool_request(
    model: str,
    page: LoadedPage,
    schema: JsonSchema,
    options: ExtractionOptions,
) -> dict[str, Any]:
    """Build the chat completion payload for one page.

    Args:
        model (str): Model identifier.
        page (LoadedPage): Loaded page.
        schema (JsonSchema): Tool parameters schema.
        options (ExtractionOptions): Prompt and temperature.

    Returns:
        dict[str, Any]: Keyword arguments for `chat.completions.create`.
    """
    payload: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": options.prompt},
            {"role": "user", "content": prepare_openai_page(page)},
        ],
        "tools": [build_extraction_tool(schema)],
        "tool_choice": "auto",
    }
    if options.temperature is not None:
        payload["temperature"] = options.temperature
    return payload


async def generate_openai_completions(
    client: ChatCompletionClient,
    model: str,
    page: Awaitable[LoadedPage],
    schema: JsonSchema | type[BaseModel],
    options: ExtractionOptions | None = None,
) -> CompletionResult[Any]:
    """Extract structured data from a page with one tool-calling request.

    The arguments of the first tool call of the first choice are parsed as
    JSON. Provider errors, a response without tool calls and malformed
    arguments all propagate to the caller.

    Args:
        client (ChatCompletionClient): `openai.AsyncOpenAI` or compatible client.
        model (str): Model identifier.
        page (Awaitable[LoadedPage]): Pending page load.
        schema (JsonSchema | type[BaseModel]): Requested output schema.
        options (ExtractionOptions | None): Prompt and temperature overrides.

    Returns:
        CompletionResult[Any]: Parsed tool arguments and page URL.
    """
    options = options or ExtractionOptions()
    loaded = await page

    payload = build_tool_request(model, loaded, resolve_json_schema(schema), options)
    logger.debug("Requesting tool-call extraction", url=loaded.url, model=model, mode=loaded.mode.value)
    completion = await client.chat.completions.create(**payload)

    arguments = completion.choices[0].message.tool_calls[0].function.arguments
    return CompletionResult(data=json.loads(arguments), url=loaded.url)
