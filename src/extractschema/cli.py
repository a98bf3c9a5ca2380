"""CLI entry point for ExtractSchema."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from extractschema import __version__, logger
from extractschema.async_runner import run_async
from extractschema.builder import combine_typescript_definitions
from extractschema.exceptions import ExtractionError, PackageError
from extractschema.inference import SchemaInferer
from extractschema.logging import configure_logging
from extractschema.service import (
    aextract_schema_from_mdx,
    extract_schema_from_code,
    persist_result,
    results_to_json_dict,
)
from extractschema.settings import Settings, get_settings
from extractschema.typing.enums import ExtractorBackendType
from extractschema.typing.models import InferOptions, SchemaExtractionResult
from extractschema.validation import validate

MDX_SUFFIXES = frozenset({".md", ".mdx"})
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2
EXIT_INTERRUPTED = 130


def _backend_from_cli(value: str) -> ExtractorBackendType:
    """Convert `--backend` CLI value into a backend type.

    Args:
        value (str): CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not supported.

    Returns:
        ExtractorBackendType: Selected backend.
    """
    try:
        return ExtractorBackendType.from_str(value.strip().lower())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="extractschema")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    extract_parser = subparsers.add_parser("extract", help="Extract schemas from a component or MDX document")
    extract_parser.add_argument("path", type=Path)
    extract_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    extract_parser.add_argument("--backend", type=_backend_from_cli, default=None)
    extract_parser.add_argument("--format", choices=("json", "typescript"), default="json", dest="output_format")
    extract_parser.add_argument(
        "--save",
        action="store_true",
        help="Write the output under RESULTS_DIR when --output is not given",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate JSON data against a schema")
    validate_parser.add_argument("--schema", required=True, type=Path, dest="schema_path")
    validate_parser.add_argument("--data", required=True, type=Path, dest="data_path")

    infer_parser = subparsers.add_parser("infer", help="Infer a schema from JSON samples")
    infer_parser.add_argument("path", type=Path)
    infer_parser.add_argument("--detect-patterns", action="store_true", dest="detect_patterns")

    return parser


def _read_json(path: Path) -> Any:  # noqa: ANN401
    """Load a JSON file.

    Args:
        path (Path): File path.

    Raises:
        ExtractionError: If the file cannot be read or is not valid JSON.

    Returns:
        Any: Decoded payload.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ExtractionError(message=f"Cannot read JSON from {path}: {exc}") from exc


def _emit(text: str, output_path: Path | None) -> None:
    if output_path is None:
        sys.stdout.write(text if text.endswith("\n") else f"{text}\n")
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")


def _resolve_output_path(args: argparse.Namespace, settings: Settings) -> Path | None:
    if args.output_path is not None or not args.save:
        return args.output_path
    suffix = ".ts" if args.output_format == "typescript" else ".json"
    return Path(settings.results_dir) / f"{args.path.stem}{suffix}"


def _run_extract(args: argparse.Namespace, settings: Settings) -> int:
    try:
        source = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(message=f"Cannot read {args.path}: {exc}") from exc

    results: SchemaExtractionResult | dict[str, SchemaExtractionResult]
    if args.path.suffix.lower() in MDX_SUFFIXES:
        results = run_async(
            aextract_schema_from_mdx(
                source,
                backend=args.backend,
                concurrency=settings.extraction_concurrency,
            ),
        )
    else:
        results = extract_schema_from_code(source, args.path.stem, backend=args.backend)

    output_path = _resolve_output_path(args, settings)
    if args.output_format == "typescript":
        text = (
            results.typescript
            if isinstance(results, SchemaExtractionResult)
            else combine_typescript_definitions(results)
        )
        _emit(text, output_path)
    elif output_path is not None:
        persist_result(results, output_path)
    else:
        _emit(json.dumps(results_to_json_dict(results), indent=2), None)

    logger.info(
        "Extraction completed",
        extra={"path": str(args.path), "output_path": str(output_path) if output_path else None},
    )
    return EXIT_OK


def _run_validate(args: argparse.Namespace) -> int:
    result = validate(_read_json(args.data_path), _read_json(args.schema_path))
    _emit(result.model_dump_json(indent=2), None)
    return EXIT_OK if result.valid else EXIT_INVALID


def _run_infer(args: argparse.Namespace, settings: Settings) -> int:
    payload = _read_json(args.path)
    inferer = SchemaInferer()
    if isinstance(payload, list) and all(isinstance(item, dict) for item in payload):
        schema = inferer.create_data_schema(payload)
        _emit(json.dumps(schema.to_dict(), indent=2), None)
        return EXIT_OK

    options = InferOptions(detect_patterns=args.detect_patterns or settings.detect_patterns)
    _emit(json.dumps(inferer.infer_from_value(payload, options).to_dict(), indent=2), None)
    return EXIT_OK


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error, 2 for invalid data).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        if args.command == "extract":
            return _run_extract(args, settings)
        if args.command == "validate":
            return _run_validate(args)
        return _run_infer(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
