"""Page loaders producing `LoadedPage` values for the adapters."""

from __future__ import annotations

import asyncio
import base64
from typing import TYPE_CHECKING

import httpx

from llmscrape import logger
from llmscrape.exceptions import PageLoadError
from llmscrape.typing.enums import PageMode
from llmscrape.typing.models import LoadedPage

if TYPE_CHECKING:
    from pathlib import Path

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})


def _read_page_file(path: Path, url: str) -> LoadedPage:
    if path.suffix.lower() in IMAGE_SUFFIXES:
        content = base64.b64encode(path.read_bytes()).decode("ascii")
        return LoadedPage(mode=PageMode.IMAGE, content=content, url=url)
    return LoadedPage(mode=PageMode.TEXT, content=path.read_text(encoding="utf-8"), url=url)


async def load_file_page(path: Path, *, url: str | None = None) -> LoadedPage:
    """Load a page saved on disk.

    Image files are base64-encoded; anything else is read as UTF-8 text.

    Args:
        path (Path): Page file.
        url (str | None): URL reported in results, defaults to the file URI.

    Raises:
        PageLoadError: If the file cannot be read.

    Returns:
        LoadedPage: Loaded page.
    """
    source = url or path.resolve().as_uri()
    try:
        page = await asyncio.to_thread(_read_page_file, path, source)
    except (OSError, UnicodeDecodeError) as exc:
        raise PageLoadError(source=str(path), message=str(exc)) from exc
    logger.debug("Loaded page from file", path=str(path), mode=page.mode.value)
    return page


async def fetch_page(url: str, client: httpx.AsyncClient) -> LoadedPage:
    """Fetch a page over HTTP.

    `image/*` responses become base64 image pages, other responses text pages.

    Args:
        url (str): Page URL.
        client (httpx.AsyncClient): HTTP client.

    Raises:
        PageLoadError: If the request fails or returns an error status.

    Returns:
        LoadedPage: Loaded page, reported under the final (post-redirect) URL.
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise PageLoadError(source=url, message=str(exc)) from exc

    final_url = str(response.url)
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("image/"):
        content = base64.b64encode(response.content).decode("ascii")
        page = LoadedPage(mode=PageMode.IMAGE, content=content, url=final_url)
    else:
        page = LoadedPage(mode=PageMode.TEXT, content=response.text, url=final_url)
    logger.debug("Fetched page", url=final_url, mode=page.mode.value, status=response.status_code)
    return page
