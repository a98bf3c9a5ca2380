"""Top-level extraction flows."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from extractschema.async_runner import gather_in_threads
from extractschema.builder import SchemaBuilder
from extractschema.extraction import get_extractor
from extractschema.logging import get_logger
from extractschema.patterns import find_fenced_code_blocks
from extractschema.settings import get_settings
from extractschema.typing.enums import ExtractorBackendType
from extractschema.typing.models import SchemaExtractionResult

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = get_logger(__name__)

DEFAULT_COMPONENT_NAME = "Component"
MDX_COMPONENT_PREFIX = "Component"


def _resolve_backend(backend: ExtractorBackendType | str | None) -> ExtractorBackendType:
    if backend is None:
        return get_settings().extractor_backend
    if isinstance(backend, ExtractorBackendType):
        return backend
    return ExtractorBackendType.from_str(backend.strip().lower())


def extract_schema_from_code(
    source: str,
    component_name: str | None = None,
    *,
    backend: ExtractorBackendType | str | None = None,
) -> SchemaExtractionResult:
    """Extract every schema view from one component's source.

    Args:
        source (str): Component source text.
        component_name (str | None): Name used in logs and parse errors.
        backend (ExtractorBackendType | str | None): Extractor backend, defaults to the
            `EXTRACTOR_BACKEND` setting.

    Raises:
        ComponentParseError: If the AST backend cannot parse the source.
        DependencyError: If the AST backend is selected without its dependencies.

    Returns:
        SchemaExtractionResult: Fields, calls, schema and renderings.
    """
    name = component_name or DEFAULT_COMPONENT_NAME
    selected = _resolve_backend(backend)
    extractor = get_extractor(selected)

    form_fields, api_calls = extractor.extract(source, name)
    builder = SchemaBuilder(interface_name=get_settings().typescript_interface_name)
    result = builder.build_result(form_fields, api_calls)

    logger.debug(
        "Component schema extracted",
        extra={
            "component": name,
            "backend": selected.to_str(),
            "form_fields": len(form_fields),
            "api_calls": len(api_calls),
            "properties": len(result.data_schema.properties),
        },
    )
    return result


def _component_names(count: int) -> list[str]:
    return [f"{MDX_COMPONENT_PREFIX}{index}" for index in range(count)]


def _collect_block_results(
    names: list[str],
    outcomes: list[SchemaExtractionResult | Exception],
) -> dict[str, SchemaExtractionResult]:
    results: dict[str, SchemaExtractionResult] = {}
    for name, outcome in zip(names, outcomes, strict=True):
        if isinstance(outcome, Exception):
            logger.error(
                "Component extraction failed",
                exc_info=outcome,
                extra={"component": name, "error": str(outcome)},
            )
            continue
        results[name] = outcome
    return results


def extract_schema_from_mdx(
    document: str,
    *,
    backend: ExtractorBackendType | str | None = None,
) -> dict[str, SchemaExtractionResult]:
    """Extract schemas from every JS/TS fenced code block of a document.

    Blocks are named `Component0`, `Component1`, ... in document order. A block
    that fails to extract, whatever the error, is logged and left out of the
    result; the remaining blocks are still extracted.

    Args:
        document (str): Markdown or MDX text.
        backend (ExtractorBackendType | str | None): Extractor backend.

    Returns:
        dict[str, SchemaExtractionResult]: Results keyed by generated component name.
    """
    blocks = find_fenced_code_blocks(document)
    names = _component_names(len(blocks))
    results: dict[str, SchemaExtractionResult] = {}
    for name, block in zip(names, blocks, strict=True):
        try:
            results[name] = extract_schema_from_code(block, name, backend=backend)
        except Exception:  # noqa: BLE001
            logger.exception("Component extraction failed", extra={"component": name})
    logger.info("Document scanned", extra={"blocks": len(blocks), "components": len(results)})
    return results


async def aextract_schema_from_mdx(
    document: str,
    *,
    backend: ExtractorBackendType | str | None = None,
    concurrency: int | None = None,
) -> dict[str, SchemaExtractionResult]:
    """Extract schemas from a document's code blocks on worker threads.

    Same naming and failure isolation as `extract_schema_from_mdx`.

    Args:
        document (str): Markdown or MDX text.
        backend (ExtractorBackendType | str | None): Extractor backend.
        concurrency (int | None): Maximum concurrent extractions, defaults to the
            `EXTRACTION_CONCURRENCY` setting.

    Returns:
        dict[str, SchemaExtractionResult]: Results keyed by generated component name.
    """
    blocks = find_fenced_code_blocks(document)
    names = _component_names(len(blocks))
    selected = _resolve_backend(backend)
    limit = concurrency or get_settings().extraction_concurrency

    def _extract(item: tuple[str, str]) -> SchemaExtractionResult:
        name, block = item
        return extract_schema_from_code(block, name, backend=selected)

    outcomes = await gather_in_threads(_extract, list(zip(names, blocks, strict=True)), concurrency=limit)
    results = _collect_block_results(names, outcomes)
    logger.info("Document scanned", extra={"blocks": len(blocks), "components": len(results)})
    return results


def results_to_json_dict(results: SchemaExtractionResult | Mapping[str, SchemaExtractionResult]) -> dict[str, object]:
    """Return the JSON payload of one result or a mapping of named results.

    Args:
        results (SchemaExtractionResult | Mapping[str, SchemaExtractionResult]): Results.

    Returns:
        dict[str, object]: JSON-serializable dictionary.
    """
    if isinstance(results, SchemaExtractionResult):
        return results.to_dict()
    return {name: result.to_dict() for name, result in results.items()}


def persist_result(results: SchemaExtractionResult | Mapping[str, SchemaExtractionResult], path: Path) -> None:
    """Persist extraction results as JSON.

    Args:
        results (SchemaExtractionResult | Mapping[str, SchemaExtractionResult]): Results.
        path (Path): Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(results_to_json_dict(results), indent=2), encoding="utf-8")

