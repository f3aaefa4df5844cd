"""Typing-centric domain modules."""

from llmscrape.typing.enums import PageMode, ProviderType
from llmscrape.typing.models import CompletionResult, ExtractionOptions, JsonSchema, LoadedPage
from llmscrape.typing.protocol import ChatCompletionClient

__all__ = [
    "ChatCompletionClient",
    "CompletionResult",
    "ExtractionOptions",
    "JsonSchema",
    "LoadedPage",
    "PageMode",
    "ProviderType",
]
