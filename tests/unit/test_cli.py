from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING, Any

import pytest

from llmscrape import cli
from llmscrape.exceptions import ConfigurationError
from llmscrape.settings import Settings
from llmscrape.typing.enums import PageMode, ProviderType
from llmscrape.typing.models import CompletionResult, ExtractionOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from pathlib import Path

    from llmscrape.typing.models import LoadedPage


def test_build_parser_supports_version_flag(capsys) -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["--version"])
    assert exc_info.value.code == 0

    captured = capsys.readouterr()
    assert "0.1.0" in captured.out


def test_parser_requires_exactly_one_source() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["extract", "--schema", "s.json"])
    with pytest.raises(SystemExit):
        parser.parse_args(["extract", "--schema", "s.json", "--input", "a.html", "--url", "https://x"])


def test_parser_reads_provider() -> None:
    args = cli.build_parser().parse_args(["extract", "--url", "https://x", "--schema", "s.json", "--provider", "llama"])

    assert args.provider is ProviderType.LLAMA


def test_options_fall_back_to_settings() -> None:
    settings = Settings(EXTRACTION_PROMPT="From settings", EXTRACTION_TEMPERATURE=0.4)

    assert cli._build_options(Namespace(prompt=None, temperature=None), settings) == ExtractionOptions(
        prompt="From settings",
        temperature=0.4,
    )
    assert cli._build_options(Namespace(prompt="From CLI", temperature=0.0), settings) == ExtractionOptions(
        prompt="From CLI",
        temperature=0.0,
    )


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    page_path = tmp_path / "page.html"
    page_path.write_text("<h1>Title</h1>", encoding="utf-8")
    schema_path = tmp_path / "schema.json"
    schema_path.write_text(json.dumps({"type": "object"}), encoding="utf-8")
    return page_path, schema_path


def test_main_runs_hosted_extraction(mocker, tmp_path: Path) -> None:
    page_path, schema_path = _write_inputs(tmp_path)
    output_path = tmp_path / "out" / "result.json"
    seen: dict[str, Any] = {}

    async def _fake_generate(
        client: object,
        model: str,
        page: Awaitable[LoadedPage],
        schema: dict[str, Any],
        options: ExtractionOptions,
    ) -> CompletionResult[Any]:
        loaded = await page
        seen.update(client=client, model=model, mode=loaded.mode, schema=schema, options=options)
        return CompletionResult(data={"title": "Title"}, url=loaded.url)

    settings = Settings()
    mocker.patch("llmscrape.cli.get_settings", return_value=settings)
    mocker.patch("llmscrape.cli.ensure_hosted_dependencies")
    mocker.patch("llmscrape.cli.build_openai_client", return_value="client")
    mocker.patch("llmscrape.cli.generate_openai_completions", new=_fake_generate)

    code = cli.main(
        [
            "extract",
            "--input",
            str(page_path),
            "--schema",
            str(schema_path),
            "--model",
            "gpt-4.1-mini",
            "--output",
            str(output_path),
        ],
    )

    assert code == 0
    assert seen["client"] == "client"
    assert seen["model"] == "gpt-4.1-mini"
    assert seen["mode"] is PageMode.TEXT
    assert seen["schema"] == {"type": "object"}
    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert written == {"data": {"title": "Title"}, "url": page_path.resolve().as_uri()}


def test_main_runs_local_extraction(mocker, tmp_path: Path) -> None:
    page_path, schema_path = _write_inputs(tmp_path)
    output_path = tmp_path / "result.json"

    async def _fake_generate(
        model: object,
        page: Awaitable[LoadedPage],
        schema: dict[str, Any],
        options: ExtractionOptions,
    ) -> CompletionResult[Any]:
        loaded = await page
        return CompletionResult(data={"model": model}, url=loaded.url)

    mocker.patch("llmscrape.cli.get_settings", return_value=Settings())
    mocker.patch("llmscrape.cli.ensure_local_dependencies")
    mocker.patch("llmscrape.cli.local_model_from_settings", return_value="local-model")
    mocker.patch("llmscrape.cli.generate_llama_completions", new=_fake_generate)

    code = cli.main(
        [
            "extract",
            "--input",
            str(page_path),
            "--schema",
            str(schema_path),
            "--provider",
            "llama",
            "--output",
            str(output_path),
        ],
    )

    assert code == 0
    assert json.loads(output_path.read_text(encoding="utf-8"))["data"] == {"model": "local-model"}


def test_main_returns_one_on_package_error(mocker, tmp_path: Path) -> None:
    page_path, schema_path = _write_inputs(tmp_path)
    output_path = tmp_path / "result.json"

    mocker.patch("llmscrape.cli.get_settings", return_value=Settings())
    mocker.patch("llmscrape.cli.ensure_hosted_dependencies")
    mocker.patch(
        "llmscrape.cli.build_openai_client",
        side_effect=ConfigurationError(setting="OPENAI_API_KEY", message="required for hosted extraction"),
    )

    code = cli.main(["extract", "--input", str(page_path), "--schema", str(schema_path), "--output", str(output_path)])

    assert code == 1
    assert not output_path.exists()


def test_main_without_command_prints_help(mocker, capsys) -> None:
    mocker.patch("llmscrape.cli.get_settings", return_value=Settings())

    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_main_returns_one_when_extraction_fails_inside_event_loop(mocker, tmp_path: Path) -> None:
    page_path, schema_path = _write_inputs(tmp_path)
    output_path = tmp_path / "result.json"

    async def _failing_generate(
        client: object,
        model: str,
        page: Awaitable[LoadedPage],
        *_rest: object,
    ) -> CompletionResult[Any]:
        await page
        raise ValueError("tool call missing")

    mocker.patch("llmscrape.cli.get_settings", return_value=Settings())
    mocker.patch("llmscrape.cli.ensure_hosted_dependencies")
    mocker.patch("llmscrape.cli.build_openai_client", return_value="client")
    mocker.patch("llmscrape.cli.generate_openai_completions", new=_failing_generate)
    fake_logger = mocker.patch("llmscrape.cli.logger")

    code = cli.main(["extract", "--input", str(page_path), "--schema", str(schema_path), "--output", str(output_path)])

    assert code == 1
    assert not output_path.exists()
    fake_logger.exception.assert_called_once_with("Unexpected error during extraction")
