"""Source extractor backends."""

from __future__ import annotations

from functools import lru_cache

from extractschema.extraction.base import BaseSchemaExtractor
from extractschema.extraction.regex_extractor import RegexSchemaExtractor
from extractschema.typing.enums import ExtractorBackendType
from extractschema.typing.protocol import SchemaExtractorBackend


@lru_cache(maxsize=None)
def get_extractor(backend: ExtractorBackendType = ExtractorBackendType.REGEX) -> SchemaExtractorBackend:
    """Return the shared extractor instance for a backend.

    Extractors hold no per-call state, so one instance per backend is reused.

    Args:
        backend (ExtractorBackendType): Backend selector.

    Raises:
        DependencyError: If the AST backend is selected without tree-sitter installed.

    Returns:
        SchemaExtractorBackend: Extractor instance.
    """
    if backend == ExtractorBackendType.AST:
        from extractschema.extraction.ast_extractor import TreeSitterSchemaExtractor  # noqa: PLC0415

        return TreeSitterSchemaExtractor()
    return RegexSchemaExtractor()


__all__ = [
    "BaseSchemaExtractor",
    "RegexSchemaExtractor",
    "SchemaExtractorBackend",
    "get_extractor",
]
