"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from typing import Any

import httpx
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from llmscrape.exceptions import SettingsError
from llmscrape.prompts import DEFAULT_PROMPT

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_parse_none_str="",
        populate_by_name=True,
    )

    project_name: str = "llmscrape"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )
    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY", description="HTTP proxy URL.")
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )

    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to SSL certificate.",
    )
    timeout: float = Field(
        default=60.0,
        validation_alias="TIMEOUT",
        description="Request timeout in seconds.",
    )
    max_connections: int = Field(
        default=20,
        validation_alias="MAX_CONNECTIONS",
        description="Maximum number of concurrent connections.",
    )

    openai_base_url: str | None = Field(
        default=None,
        validation_alias="OPENAI_BASE_URL",
        description="Base URL for OpenAI API.",
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
        description="API key for OpenAI.",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_MODEL",
        description="OpenAI model to use.",
    )

    llama_model_path: str | None = Field(
        default=None,
        validation_alias="LLAMA_MODEL_PATH",
        description="Path to a GGUF model file for local extraction.",
    )
    llama_context_size: int = Field(
        default=4096,
        ge=0,
        validation_alias="LLAMA_CONTEXT_SIZE",
        description="Context window of each local inference context.",
    )
    llama_gpu_layers: int = Field(
        default=0,
        validation_alias="LLAMA_GPU_LAYERS",
        description="Number of layers offloaded to the GPU (-1 for all).",
    )

    extraction_prompt: str = Field(
        default=DEFAULT_PROMPT,
        validation_alias="EXTRACTION_PROMPT",
        description="Instruction prompt sent with every page.",
    )
    extraction_temperature: float | None = Field(
        default=None,
        ge=0.0,
        validation_alias="EXTRACTION_TEMPERATURE",
        description="Sampling temperature; provider default when unset.",
    )

    _httpx_client: httpx.AsyncClient | None = PrivateAttr(default=None)

    @property
    def httpx_client(self) -> httpx.AsyncClient:
        """Return the cached async HTTPX client, creating it on first use."""
        if self._httpx_client is None or self._httpx_client.is_closed:
            self._httpx_client = httpx.AsyncClient(
                **build_httpx_client_kwargs(self),
                limits=httpx.Limits(max_connections=self.max_connections),
            )
        return self._httpx_client

    async def aclose_httpx_client(self) -> None:
        """Close the cached async HTTPX client (best effort)."""
        client = self._httpx_client
        self._httpx_client = None
        if client is None:
            return
        try:
            await client.aclose()
        except Exception:
            logger.warning("Failed to close async HTTPX client")


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path)
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def build_httpx_client_kwargs(settings: Settings) -> dict[str, Any]:
    """Build kwargs used for `httpx.AsyncClient`.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        dict[str, Any]: Arguments for the client constructor.
    """
    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
        "follow_redirects": True,
    }

    proxy_url = settings.https_proxy or settings.http_proxy
    if proxy_url:
        kwargs["proxy"] = proxy_url
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        raise SettingsError(exc=exc) from exc
