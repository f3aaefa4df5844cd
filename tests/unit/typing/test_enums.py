from __future__ import annotations

import pytest

from llmscrape.typing.enums import PageMode, ProviderType


def test_from_str_parses_values() -> None:
    assert PageMode.from_str("image") is PageMode.IMAGE
    assert ProviderType.from_str("llama") is ProviderType.LLAMA


def test_from_str_lists_supported_values() -> None:
    with pytest.raises(ValueError, match="Expected one of: openai, llama"):
        ProviderType.from_str("anthropic")
