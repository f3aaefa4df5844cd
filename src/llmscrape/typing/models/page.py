"""Loaded page model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from llmscrape.typing.enums import PageMode


class LoadedPage(BaseModel):
    """Page produced by a loader: raw text, or base64 image bytes when `mode` is image."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: PageMode
    content: str
    url: str
