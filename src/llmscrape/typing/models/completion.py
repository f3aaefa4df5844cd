"""Extraction options and result models."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from llmscrape.prompts import DEFAULT_PROMPT

DataT = TypeVar("DataT")

JsonSchema = dict[str, Any]


class ExtractionOptions(BaseModel):
    """Optional knobs shared by every adapter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    prompt: str = DEFAULT_PROMPT
    temperature: float | None = Field(default=None, ge=0.0)


class CompletionResult(BaseModel, Generic[DataT]):
    """Parsed model output paired with the URL of the page it came from.

    `data` is whatever the model produced for the requested schema; it is not
    validated against that schema.
    """

    model_config = ConfigDict(frozen=True)

    data: DataT
    url: str
