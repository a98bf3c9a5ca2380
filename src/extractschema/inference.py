"""Value-based schema inference."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from extractschema.typing.enums import SchemaType
from extractschema.typing.models import DataSchema, InferOptions, PropertySchema

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_PHONE_RE = re.compile(r"^[\d\s\-+()]+$")
_URL_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(.*)$", re.DOTALL)
_HOST_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_MIN_PHONE_DIGITS = 10

# Checked in order; the first matching source is attached as `pattern`.
KNOWN_STRING_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^[A-Z0-9]{2,}-\d+$"), r"^[A-Z0-9]{2,}-\d+$"),
    (re.compile(r"^[a-z0-9]{8,}$"), r"^[a-z0-9]{8,}$"),
    (re.compile(r"^[A-Z]{3}$"), r"^[A-Z]{3}$"),
    (re.compile(r"^\d{5}(-\d{4})?$"), r"^\d{5}(-\d{4})?$"),
)

_DEFAULT_OPTIONS = InferOptions()


def is_email(value: str) -> bool:
    """Return whether the string looks like an email address."""
    return bool(_EMAIL_RE.match(value))


def is_url(value: str) -> bool:
    """Return whether the string is an absolute URL (scheme required).

    Args:
        value (str): Candidate string.

    Returns:
        bool: True when the string parses as an absolute URL.
    """
    match = _URL_SCHEME_RE.match(value.strip())
    if match is None:
        return False
    scheme, rest = match.group(1).lower(), match.group(2)
    if any(char.isspace() for char in rest):
        return False
    if scheme in _HOST_SCHEMES:
        host = rest.removeprefix("//").split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]
        return rest.startswith("//") and bool(host.rsplit("@", 1)[-1])
    return True


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 date or date-time string.

    Args:
        value (str): Candidate string.

    Returns:
        datetime | None: Parsed value, None when the string is not a valid ISO timestamp.
    """
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def is_date(value: str) -> bool:
    """Return whether the string is exactly a valid `YYYY-MM-DD` date."""
    if not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_date_time(value: str) -> bool:
    """Return whether the string starts with `YYYY-MM-DDTHH:MM:SS` and parses."""
    return bool(_DATE_TIME_RE.match(value)) and parse_iso_datetime(value) is not None


def is_uuid(value: str) -> bool:
    """Return whether the string is a canonical 8-4-4-4-12 hex UUID."""
    return bool(_UUID_RE.match(value))


def is_phone_number(value: str) -> bool:
    """Return whether the string is a separator-formatted number with at least ten digits."""
    if not _PHONE_RE.match(value):
        return False
    return sum(char.isdigit() for char in value) >= _MIN_PHONE_DIGITS


# Format detectors in priority order.
_FORMAT_DETECTORS = (
    ("email", is_email),
    ("url", is_url),
    ("date", is_date),
    ("date-time", is_date_time),
    ("uuid", is_uuid),
    ("phone", is_phone_number),
)


def detect_string_format(value: str) -> str | None:
    """Return the first format a string satisfies.

    Args:
        value (str): Candidate string.

    Returns:
        str | None: Format name, None when no detector matches.
    """
    for name, detector in _FORMAT_DETECTORS:
        if detector(value):
            return name
    return None


def detect_pattern(value: str) -> str | None:
    """Return the first well-known pattern source a string matches.

    Args:
        value (str): Candidate string.

    Returns:
        str | None: Regex source, None when no known pattern matches.
    """
    for regex, source in KNOWN_STRING_PATTERNS:
        if regex.match(value):
            return source
    return None


class SchemaInferer:
    """Infer structural schemas from concrete values and sample batches."""

    def infer_from_value(self, value: Any, options: InferOptions | None = None) -> PropertySchema:  # noqa: ANN401
        """Infer a schema for one value.

        `None` maps to a plain string schema rather than a nullable type.

        Args:
            value (Any): Value to describe.
            options (InferOptions | None): Inference options, propagated to nested values.

        Returns:
            PropertySchema: Inferred schema.
        """
        opts = options or _DEFAULT_OPTIONS
        if value is None:
            return PropertySchema(type=SchemaType.STRING)
        if isinstance(value, list | tuple):
            return self._infer_array_schema(value, opts)
        if isinstance(value, datetime):
            return PropertySchema(type=SchemaType.STRING, format="date-time")
        if isinstance(value, date):
            return PropertySchema(type=SchemaType.STRING, format="date")
        if isinstance(value, Mapping):
            return self._infer_object_schema(value, opts)
        if isinstance(value, str):
            return self._infer_string_schema(value, opts)
        if isinstance(value, bool):
            return PropertySchema(type=SchemaType.BOOLEAN)
        if isinstance(value, int | float):
            return PropertySchema(type=SchemaType.NUMBER)
        return PropertySchema(type=SchemaType.STRING)

    def infer_from_samples(self, samples: Sequence[Any]) -> PropertySchema:
        """Infer one schema from several values of the same logical field.

        Disagreeing top-level types fall back to a plain string schema.

        Args:
            samples (Sequence[Any]): Observed values.

        Returns:
            PropertySchema: Merged schema.
        """
        if not samples:
            return PropertySchema(type=SchemaType.STRING)
        schemas = [self.infer_from_value(sample) for sample in samples]
        if len({schema.type for schema in schemas}) == 1:
            return self.merge_schemas(schemas)
        return PropertySchema(type=SchemaType.STRING)

    def merge_schemas(self, schemas: Sequence[PropertySchema]) -> PropertySchema:
        """Merge schemas, starting from the first one.

        Object properties are unioned (shared keys merged recursively) and
        `required` lists are unioned too. Array item schemas are merged.
        Every other attribute comes from the first schema.

        Args:
            schemas (Sequence[PropertySchema]): Schemas to merge.

        Returns:
            PropertySchema: Merged schema; the inputs are left untouched.
        """
        if not schemas:
            return PropertySchema(type=SchemaType.STRING)
        base = schemas[0]
        if len(schemas) == 1:
            return base

        update: dict[str, Any] = {}
        if base.type == SchemaType.OBJECT and base.properties is not None:
            properties = dict(base.properties)
            required = list(base.required) if base.required is not None else None
            for schema in schemas[1:]:
                if schema.type != SchemaType.OBJECT or schema.properties is None:
                    continue
                for key, prop in schema.properties.items():
                    properties[key] = self.merge_schemas([properties[key], prop]) if key in properties else prop
                if schema.required is not None and required is not None:
                    required = list(dict.fromkeys([*required, *schema.required]))
            update["properties"] = properties
            update["required"] = required

        if base.type == SchemaType.ARRAY and base.items is not None:
            item_schemas = [
                schema.items for schema in schemas if schema.type == SchemaType.ARRAY and schema.items is not None
            ]
            update["items"] = self.merge_schemas(item_schemas)

        return base.model_copy(update=update) if update else base

    def create_data_schema(self, samples: Sequence[Mapping[str, Any]]) -> DataSchema:
        """Build a root schema from sample records.

        A key is required only when every sample holds a non-null value for it;
        a missing key counts as absent rather than null.

        Args:
            samples (Sequence[Mapping[str, Any]]): Sample records.

        Returns:
            DataSchema: Root schema describing the samples.
        """
        if not samples:
            return DataSchema()

        observed: dict[str, list[Any]] = {}
        for sample in samples:
            for key, value in sample.items():
                observed.setdefault(key, []).append(value)

        total = len(samples)
        required = [
            key for key, values in observed.items() if sum(value is not None for value in values) == total
        ]
        properties = {key: self.infer_from_samples(values) for key, values in observed.items()}
        return DataSchema(properties=properties, required=required)

    def _infer_array_schema(self, values: Sequence[Any], options: InferOptions) -> PropertySchema:
        if not values:
            return PropertySchema(type=SchemaType.ARRAY)
        inspected = values[: options.sample_size] if options.sample_size else values
        item_schemas = [self.infer_from_value(item, options) for item in inspected]
        if len({schema.type for schema in item_schemas}) > 1:
            return PropertySchema(type=SchemaType.ARRAY, items=PropertySchema(type=SchemaType.STRING))
        return PropertySchema(type=SchemaType.ARRAY, items=self.merge_schemas(item_schemas))

    def _infer_object_schema(self, value: Mapping[str, Any], options: InferOptions) -> PropertySchema:
        properties: dict[str, PropertySchema] = {}
        required: list[str] = []
        for key, item in value.items():
            properties[str(key)] = self.infer_from_value(item, options)
            if item is not None and options.mark_required:
                required.append(str(key))
        return PropertySchema(type=SchemaType.OBJECT, properties=properties, required=required)

    @staticmethod
    def _infer_string_schema(value: str, options: InferOptions) -> PropertySchema:
        pattern = detect_pattern(value) if options.detect_patterns else None
        return PropertySchema(type=SchemaType.STRING, format=detect_string_format(value), pattern=pattern)
