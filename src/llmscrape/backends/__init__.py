"""Extraction backends."""

from llmscrape.backends.llama_local import (
    JsonSchemaGrammar,
    LlamaChatSession,
    LocalModel,
    generate_llama_completions,
    local_model_from_settings,
)
from llmscrape.backends.openai_tools import build_openai_client, generate_openai_completions

__all__ = [
    "JsonSchemaGrammar",
    "LlamaChatSession",
    "LocalModel",
    "build_openai_client",
    "generate_llama_completions",
    "generate_openai_completions",
    "local_model_from_settings",
]
