"""Extractor backend interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from extractschema.typing.models import APICall, FormField


class SchemaExtractorBackend(Protocol):
    """Source extractor interface shared by the regex and AST backends."""

    def extract_form_fields(self, source: str, component_name: str = "Component") -> list[FormField]:
        """Recover deduplicated form fields from component source.

        Args:
            source: Component source text.
            component_name: Name used in parse error reports.

        Returns:
            list[FormField]: Fields in discovery order.
        """

    def extract_api_calls(self, source: str, component_name: str = "Component") -> list[APICall]:
        """Recover outbound request calls from component source.

        Args:
            source: Component source text.
            component_name: Name used in parse error reports.

        Returns:
            list[APICall]: Calls in discovery order.
        """

    def extract(self, source: str, component_name: str = "Component") -> tuple[list[FormField], list[APICall]]:
        """Recover form fields and API calls from a single parse of the source.

        Args:
            source: Component source text.
            component_name: Name used in parse error reports.

        Returns:
            tuple[list[FormField], list[APICall]]: Fields and calls in discovery order.
        """
