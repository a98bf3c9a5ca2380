"""ExtractSchema package."""

from extractschema.async_runner import run_async
from extractschema.builder import SchemaBuilder, combine_json_schemas, combine_typescript_definitions
from extractschema.exceptions import (
    AsyncExecutionError,
    ComponentParseError,
    DependencyError,
    ExtractionError,
    PackageError,
    SettingsError,
)
from extractschema.inference import SchemaInferer
from extractschema.logging import configure_logging, get_logger
from extractschema.service import (
    aextract_schema_from_mdx,
    extract_schema_from_code,
    extract_schema_from_mdx,
    persist_result,
)
from extractschema.settings import Settings, get_settings
from extractschema.validation import SchemaValidator, validate

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("extractschema")

__all__ = [
    "AsyncExecutionError",
    "ComponentParseError",
    "DependencyError",
    "ExtractionError",
    "PackageError",
    "SchemaBuilder",
    "SchemaInferer",
    "SchemaValidator",
    "Settings",
    "SettingsError",
    "__version__",
    "aextract_schema_from_mdx",
    "combine_json_schemas",
    "combine_typescript_definitions",
    "configure_logging",
    "extract_schema_from_code",
    "extract_schema_from_mdx",
    "get_logger",
    "get_settings",
    "logger",
    "persist_result",
    "run_async",
    "validate",
]
