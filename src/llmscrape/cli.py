"""CLI entry point for LLMScrape."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any

from llmscrape import __version__, logger
from llmscrape.backends.llama_local import generate_llama_completions, local_model_from_settings
from llmscrape.backends.openai_tools import build_openai_client, generate_openai_completions
from llmscrape.dependencies import ensure_hosted_dependencies, ensure_local_dependencies
from llmscrape.exceptions import PackageError
from llmscrape.loaders import fetch_page, load_file_page
from llmscrape.logging import configure_logging
from llmscrape.schemas import load_json_schema
from llmscrape.settings import get_settings
from llmscrape.typing.enums import ProviderType
from llmscrape.typing.models import CompletionResult, ExtractionOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from llmscrape.settings import Settings
    from llmscrape.typing.models import LoadedPage


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="llmscrape")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    extract_parser = subparsers.add_parser("extract", help="Extract structured data from a web page")
    source = extract_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, default=None, dest="input_path")
    source.add_argument("--url", default=None)
    extract_parser.add_argument("--schema", required=True, type=Path, dest="schema_path")
    extract_parser.add_argument(
        "--provider",
        default=ProviderType.OPENAI,
        type=ProviderType.from_str,
        choices=list(ProviderType),
    )
    extract_parser.add_argument("--model", default=None, help="Hosted model id (defaults to OPENAI_MODEL)")
    extract_parser.add_argument("--prompt", default=None)
    extract_parser.add_argument("--temperature", type=float, default=None)
    extract_parser.add_argument(
        "--output",
        type=Path,
        default=Path("results/result.json"),
        dest="output_path",
    )

    return parser


def _build_options(args: argparse.Namespace, settings: Settings) -> ExtractionOptions:
    """Merge CLI overrides with settings defaults.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        ExtractionOptions: Options passed to the adapter.
    """
    temperature = args.temperature if args.temperature is not None else settings.extraction_temperature
    return ExtractionOptions(prompt=args.prompt or settings.extraction_prompt, temperature=temperature)


def _load_page(args: argparse.Namespace, settings: Settings) -> Awaitable[LoadedPage]:
    if args.url:
        return fetch_page(args.url, settings.httpx_client)
    return load_file_page(args.input_path)


async def _extract(args: argparse.Namespace, settings: Settings) -> CompletionResult[Any]:
    """Run one extraction with the selected provider.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        CompletionResult[Any]: Extraction result.
    """
    schema = load_json_schema(args.schema_path)
    options = _build_options(args, settings)
    try:
        if args.provider == ProviderType.LLAMA:
            model = local_model_from_settings(settings)
            return await generate_llama_completions(model, _load_page(args, settings), schema, options)

        client = build_openai_client(settings)
        model_id = args.model or settings.openai_model
        return await generate_openai_completions(client, model_id, _load_page(args, settings), schema, options)
    finally:
        await settings.aclose_httpx_client()


def persist_result(result: CompletionResult[Any], output_path: Path) -> None:
    """Write an extraction result as JSON.

    Args:
        result (CompletionResult[Any]): Extraction result.
        output_path (Path): Destination file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.model_dump_json(indent=2), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "extract":
        parser.print_help()
        return 0

    try:
        if args.provider == ProviderType.LLAMA:
            ensure_local_dependencies()
        else:
            ensure_hosted_dependencies()
        result = asyncio.run(_extract(args, settings))
    except PackageError:
        logger.exception("Extraction failed")
        return 1
    except KeyboardInterrupt:
        logger.info("Extraction aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error during extraction")
        return 1

    persist_result(result, args.output_path)
    logger.info("Extraction completed", output_path=str(args.output_path), url=result.url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
