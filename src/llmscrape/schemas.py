"""Extraction schema helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from llmscrape.typing.models import JsonSchema


def resolve_json_schema(schema: JsonSchema | type[BaseModel]) -> JsonSchema:
    """Return a JSON schema dict for a raw schema or a pydantic model class.

    Args:
        schema (JsonSchema | type[BaseModel]): Caller-supplied schema.

    Raises:
        TypeError: If the schema is neither a dict nor a pydantic model class.

    Returns:
        JsonSchema: JSON schema payload.
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema.model_json_schema()
    if isinstance(schema, dict):
        return schema
    raise TypeError(f"Unsupported schema type: {type(schema).__name__}")  # noqa: TRY003


def load_json_schema(path: Path) -> JsonSchema:
    """Read a JSON schema file.

    Args:
        path (Path): Schema file path.

    Raises:
        ValueError: If the file does not hold a JSON object.

    Returns:
        JsonSchema: Parsed schema.
    """
    payload: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Schema file must contain a JSON object: {path}")  # noqa: TRY003
    return payload
