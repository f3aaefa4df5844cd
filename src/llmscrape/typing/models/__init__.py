"""Core domain model exports."""

from llmscrape.typing.models.completion import CompletionResult, ExtractionOptions, JsonSchema
from llmscrape.typing.models.page import LoadedPage

__all__ = [
    "CompletionResult",
    "ExtractionOptions",
    "JsonSchema",
    "LoadedPage",
]
