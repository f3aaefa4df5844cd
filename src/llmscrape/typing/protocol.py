"""Provider interfaces consumed by the adapters."""

from __future__ import annotations

from typing import Any, Protocol


class ChatCompletions(Protocol):
    """The `chat.completions` resource of an OpenAI-compatible async client."""

    async def create(self, **kwargs: Any) -> Any:
        """Send one chat completion request."""


class _Chat(Protocol):
    completions: ChatCompletions


class ChatCompletionClient(Protocol):
    """Minimal surface of `openai.AsyncOpenAI` used by the hosted adapter."""

    chat: _Chat
