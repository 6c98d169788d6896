"""
Mapping coverage report.

Lists the struct types without a name override and the struct fields
without a feature tag, so mapping files can be completed before a
generation run.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from ...utils import strip_namespace_prefix
from ..config import CodegenConfig
from ..schema_ast.nodes import Schema
from .classifier import TypeClassifier
from .field_extractor import FieldExtractor
from .name_resolver import NameResolver


@dataclass
class ModuleReport:
    """Mapping coverage of the struct parsers of one module."""

    # Raw type names (CT_Body) with no name override
    unmapped_types: list[str] = field(default_factory=list)

    # "<type name>.<xml name>" of fields with no feature tags
    unmapped_fields: list[str] = field(default_factory=list)

    total_types: int = 0
    total_fields: int = 0

    @property
    def has_unmapped(self) -> bool:
        return bool(self.unmapped_types or self.unmapped_fields)

    def format(self, module: str) -> str:
        """Render the report as indented text lines."""
        if not self.has_unmapped:
            return f"Module '{module}': {self.total_types} types, {self.total_fields} fields, all mapped"

        lines = [
            f"Module '{module}': {self.total_types} types ({len(self.unmapped_types)} unmapped), "
            f"{self.total_fields} fields ({len(self.unmapped_fields)} unmapped)"
        ]
        if self.unmapped_types:
            lines.append("  Unmapped types (name mappings):")
            lines.extend(f"    - {name}" for name in self.unmapped_types)
        if self.unmapped_fields:
            lines.append("  Unmapped fields (feature mappings):")
            lines.extend(f"    - {name}" for name in self.unmapped_fields)
        return "\n".join(lines)


def analyze_schema(schema: Schema, config: CodegenConfig) -> ModuleReport:
    """
    Check the struct definitions of a schema against the configured mappings.

    Element groups, simple types and aliases are not counted. A missing
    mapping table means every name uses the defaults, so nothing is
    reported against it.

    Args:
        schema: The schema to analyze
        config: Configuration holding the module name and mappings

    Returns:
        The coverage report, entries in definition order
    """
    # The analysis reports misses itself instead of logging them
    config = dataclasses.replace(config, warn_unmapped=False)
    names = NameResolver(config)
    classifier = TypeClassifier(schema, config, names)
    extractor = FieldExtractor(config, names)
    conventions = config.conventions
    module = config.module_name

    report = ModuleReport()
    for definition in schema.definitions:
        if not classifier.has_parser(definition.name, definition.pattern):
            continue
        if conventions.is_element_group(definition.name) and classifier.is_element_choice(definition.pattern):
            continue

        report.total_types += 1
        raw_name = strip_namespace_prefix(definition.name, conventions.markers)
        if config.name_mappings is not None and not config.name_mappings.resolve_type(module, raw_name):
            report.unmapped_types.append(raw_name)

        # Feature tags are keyed by the generated type name
        type_name = names.type_name(definition.name)
        for struct_field in extractor.extract_fields(definition.pattern):
            report.total_fields += 1
            features = config.feature_mappings
            if features is not None and features.get_tags(module, type_name, struct_field.xml_name) is None:
                report.unmapped_fields.append(f"{type_name}.{struct_field.xml_name}")

    return report
