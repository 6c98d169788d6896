"""
Name resolver for generated identifiers.

Converts schema definition names and XML names to target-language
identifiers, consulting the naming overrides before falling back to
case conversion and keyword escaping.
"""

from __future__ import annotations

import logging

from ...utils import strip_namespace_prefix, to_pascal_case, to_snake_case
from ..config import CodegenConfig
from ..schema_ast.nodes import QName

logger = logging.getLogger(__name__)


class NameResolver:
    """Resolves type, variant and field names."""

    def __init__(self, config: CodegenConfig):
        """
        Initialize the resolver.

        Args:
            config: Code generation configuration (module name, overrides, keyword table)
        """
        self.config = config
        self._reported_unmapped: set[tuple[str, str]] = set()

    def _report_unmapped(self, kind: str, raw_name: str) -> None:
        # Without mappings every name uses the default conversion
        if not self.config.warn_unmapped or self.config.name_mappings is None:
            return
        if (kind, raw_name) in self._reported_unmapped:
            return
        self._reported_unmapped.add((kind, raw_name))
        logger.warning("No %s name mapping for %s in module '%s'", kind, raw_name, self.config.module_name)

    def type_name(self, definition_name: str) -> str:
        """Convert a definition name ("w_CT_Body") to a type name ("CTBody" or its override)."""
        raw_name = strip_namespace_prefix(definition_name, self.config.conventions.markers)
        mappings = self.config.name_mappings
        if mappings is not None:
            mapped = mappings.resolve_type(self.config.module_name, raw_name)
            if mapped:
                return mapped

        self._report_unmapped("type", raw_name)
        return to_pascal_case(raw_name)

    def variant_name(self, xml_name: str) -> str:
        """Convert an element name to an enum variant name."""
        if not xml_name:
            return "Empty"
        mappings = self.config.name_mappings
        if mappings is not None:
            mapped = mappings.resolve_variant(self.config.module_name, xml_name)
            if mapped:
                return mapped
        name = to_pascal_case(xml_name)
        # Identifiers cannot start with a digit
        if name[:1].isdigit():
            return f"_{name}"
        return name

    def field_name(self, qname: QName) -> str:
        """Convert an attribute/element name to a struct field name."""
        mappings = self.config.name_mappings
        if mappings is not None:
            mapped = mappings.resolve_field(self.config.module_name, qname.local)
            if mapped:
                return mapped

        self._report_unmapped("field", qname.local)
        return to_snake_case(qname.local, self.config.reserved_words, self.config.keyword_escape_prefix)

    def slot_variable(self, field_name: str) -> str:
        """Local variable holding a field while parsing ("r#type" -> "f_type")."""
        base = field_name.removeprefix(self.config.keyword_escape_prefix)
        return f"f_{base.lstrip('_')}"
