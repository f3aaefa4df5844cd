"""Prompt constants and builders shared by the extraction adapters."""

from __future__ import annotations

from typing import Any

DEFAULT_PROMPT = "You are a satisfied web scraper. Extract the contents of the webpage"

EXTRACTION_TOOL_NAME = "extract_content"
EXTRACTION_TOOL_DESCRIPTION = "Extracts the content from the given webpage(s)"


def build_extraction_tool(schema: dict[str, Any]) -> dict[str, Any]:
    """Build the single function tool offered to the hosted model.

    Args:
        schema (dict[str, Any]): JSON schema used as the tool parameters.

    Returns:
        dict[str, Any]: OpenAI tool definition.
    """
    return {
        "type": "function",
        "function": {
            "name": EXTRACTION_TOOL_NAME,
            "description": EXTRACTION_TOOL_DESCRIPTION,
            "parameters": schema,
        },
    }


def build_page_prompt(prompt: str, content: str) -> str:
    """Join the instruction prompt and raw page content for local models."""
    return f"{prompt}\n{content}"
