"""Runtime dependency checks for optional extractor backends."""

from __future__ import annotations

import importlib.util
from types import MappingProxyType

from extractschema.exceptions import DependencyError
from extractschema.typing.enums import ExtractorBackendType

# backend -> {distribution name: import module}
BACKEND_DEPENDENCIES = MappingProxyType(
    {
        ExtractorBackendType.REGEX: MappingProxyType({}),
        ExtractorBackendType.AST: MappingProxyType(
            {
                "tree-sitter": "tree_sitter",
                "tree-sitter-typescript": "tree_sitter_typescript",
            },
        ),
    },
)


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def missing_backend_dependencies(backend: ExtractorBackendType) -> list[str]:
    """List the distributions an extractor backend needs but cannot import.

    Args:
        backend (ExtractorBackendType): Backend selector.

    Returns:
        list[str]: Missing distribution names, empty when the backend is usable.
    """
    modules_by_package = BACKEND_DEPENDENCIES.get(backend, {})
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_backend_dependencies(backend: ExtractorBackendType) -> None:
    """Validate the optional packages of an extractor backend.

    Args:
        backend (ExtractorBackendType): Backend selector.

    Raises:
        DependencyError: If one or more required modules are missing.
    """
    missing = missing_backend_dependencies(backend)
    if missing:
        raise DependencyError(missing_package=missing, message=f"{backend.to_str()} extractor")
