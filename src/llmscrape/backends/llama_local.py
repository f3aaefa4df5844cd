"""Local extraction with grammar-constrained llama.cpp generation."""

from __future__ import annotations

import asyncio
import json
from contextlib import closing
from typing import TYPE_CHECKING, Any

try:
    import llama_cpp
except Exception:  # pragma: no cover - optional dependency at runtime
    llama_cpp: Any
    llama_cpp = None

import jsonschema
from pydantic import BaseModel, ConfigDict, Field

from llmscrape import logger
from llmscrape.exceptions import ConfigurationError, DependencyError
from llmscrape.prompts import build_page_prompt
from llmscrape.schemas import resolve_json_schema
from llmscrape.typing.models import CompletionResult, ExtractionOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from llmscrape.settings import Settings
    from llmscrape.typing.models import JsonSchema, LoadedPage


def _require_llama_cpp() -> Any:
    """Return the `llama_cpp` module.

    Raises:
        DependencyError: If `llama-cpp-python` is not installed.

    Returns:
        Any: The imported module.
    """
    if llama_cpp is None:
        raise DependencyError(missing_package=["llama-cpp-python"], message="local extraction")
    return llama_cpp


class LocalModel(BaseModel):
    """Handle on a GGUF model file and the parameters of its inference contexts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    model_path: str
    context_size: int = Field(default=4096, ge=0)
    gpu_layers: int = 0

    def create_context(self) -> Any:
        """Create a new inference context for this model.

        llama.cpp binds weights and context in one `Llama` object; weights are
        memory-mapped so contexts of the same file share them.

        Returns:
            Any: A `llama_cpp.Llama` instance owned by the caller.
        """
        return _require_llama_cpp().Llama(
            model_path=self.model_path,
            n_ctx=self.context_size,
            n_gpu_layers=self.gpu_layers,
            use_mmap=True,
            verbose=False,
        )


def local_model_from_settings(settings: Settings) -> LocalModel:
    """Build a local model handle from settings.

    Args:
        settings (Settings): Runtime settings.

    Raises:
        ConfigurationError: If no model path is configured.

    Returns:
        LocalModel: Model handle.
    """
    if not settings.llama_model_path:
        raise ConfigurationError(setting="LLAMA_MODEL_PATH", message="required for local extraction")
    return LocalModel(
        model_path=settings.llama_model_path,
        context_size=settings.llama_context_size,
        gpu_layers=settings.llama_gpu_layers,
    )


class JsonSchemaGrammar:
    """GBNF grammar constraining generation to instances of a JSON schema."""

    def __init__(self, schema: JsonSchema) -> None:
        """Compile the grammar.

        Args:
            schema (JsonSchema): Target JSON schema.
        """
        self.schema = schema
        self.grammar = _require_llama_cpp().LlamaGrammar.from_json_schema(json.dumps(schema), verbose=False)

    def parse(self, text: str) -> Any:
        """Parse text generated under this grammar and check it against the schema.

        Raises:
            json.JSONDecodeError: If the text is not valid JSON.
            jsonschema.ValidationError: If the parsed value does not conform to the schema.
        """
        data = json.loads(text)
        jsonschema.validate(data, self.schema)
        return data


class LlamaChatSession:
    """Chat session over a single inference context."""

    def __init__(self, context: Any) -> None:
        """Bind the session to a context.

        Args:
            context (Any): `llama_cpp.Llama` inference context.
        """
        self._context = context
        self._messages: list[dict[str, str]] = []

    def prompt(self, text: str, *, grammar: JsonSchemaGrammar, temperature: float | None = None) -> str:
        """Send one user turn and return the assistant answer.

        Args:
            text (str): User message.
            grammar (JsonSchemaGrammar): Grammar constraining the answer.
            temperature (float | None): Sampling temperature, runtime default when None.

        Returns:
            str: Raw generated text.
        """
        self._messages.append({"role": "user", "content": text})
        kwargs: dict[str, Any] = {"messages": list(self._messages), "grammar": grammar.grammar}
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = self._context.create_chat_completion(**kwargs)
        answer = response["choices"][0]["message"]["content"] or ""
        self._messages.append({"role": "assistant", "content": answer})
        return answer

    def close(self) -> None:
        """Drop the conversation history."""
        self._messages.clear()


def _prompt_in_new_session(
    model: LocalModel,
    text: str,
    grammar: JsonSchemaGrammar,
    temperature: float | None,
) -> str:
    """Run one prompt in a context and session released before returning."""
    with closing(model.create_context()) as context, closing(LlamaChatSession(context)) as session:
        return session.prompt(text, grammar=grammar, temperature=temperature)


async def generate_llama_completions(
    model: LocalModel,
    page: Awaitable[LoadedPage],
    schema: JsonSchema | type[BaseModel],
    options: ExtractionOptions | None = None,
) -> CompletionResult[Any]:
    """Extract structured data from a page with a local grammar-constrained model.

    Image pages are not special-cased: their content is appended to the
    prompt as-is.

    Args:
        model (LocalModel): Local model handle.
        page (Awaitable[LoadedPage]): Pending page load.
        schema (JsonSchema | type[BaseModel]): Requested output schema.
        options (ExtractionOptions | None): Prompt and temperature overrides.

    Returns:
        CompletionResult[Any]: Grammar-parsed output and page URL.
    """
    options = options or ExtractionOptions()
    loaded = await page

    grammar = JsonSchemaGrammar(resolve_json_schema(schema))
    text = build_page_prompt(options.prompt, loaded.content)
    logger.debug("Running grammar-constrained extraction", url=loaded.url, model_path=model.model_path)
    raw = await asyncio.to_thread(_prompt_in_new_session, model, text, grammar, options.temperature)

    return CompletionResult(data=grammar.parse(raw), url=loaded.url)
