"""Page formatting for OpenAI chat content parts."""

from __future__ import annotations

from typing import Any

from llmscrape.typing.enums import PageMode
from llmscrape.typing.models import LoadedPage


def prepare_openai_page(page: LoadedPage) -> list[dict[str, Any]]:
    """Convert a loaded page into OpenAI user-message content parts.

    Image pages become a single JPEG data-URI part; every other mode is sent
    as one text part holding the raw content.

    Args:
        page (LoadedPage): Loaded page.

    Returns:
        list[dict[str, Any]]: Content parts for a chat message.
    """
    if page.mode == PageMode.IMAGE:
        return [
            {
                "type": "image_url",
                "image_url": {"url": f"data:image/jpeg;base64,{page.content}"},
            },
        ]
    return [{"type": "text", "text": page.content}]
