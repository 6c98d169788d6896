"""
Field extraction for struct-shaped definitions.

Flattens a definition pattern into the ordered list of attributes and
child elements a struct parser fills in.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import CodegenConfig
from ..schema_ast.nodes import (
    Attribute,
    Choice,
    Element,
    Group,
    Interleave,
    OneOrMore,
    Optional,
    Pattern,
    PatternVisitor,
    Ref,
    Sequence,
    ZeroOrMore,
)
from .name_resolver import NameResolver


@dataclass(frozen=True)
class Field:
    """A named field of a struct parser, derived for one generation pass."""

    name: str  # Identifier in the generated struct
    xml_name: str  # Local XML name of the attribute or element
    pattern: Pattern  # Content pattern of the attribute or element
    is_optional: bool = False
    is_attribute: bool = False
    is_vec: bool = False


class FieldCollector(PatternVisitor):
    """Collects fields in document order; the visit argument is the optionality context."""

    def __init__(self, names: NameResolver):
        self.names = names
        self.fields: list[Field] = []

    def _leaf(self, name, pattern: Pattern, is_optional: bool, is_attribute: bool, is_vec: bool = False) -> None:
        self.fields.append(
            Field(
                name=self.names.field_name(name),
                xml_name=name.local,
                pattern=pattern,
                is_optional=is_optional,
                is_attribute=is_attribute,
                is_vec=is_vec,
            )
        )

    def visit_attribute(self, pattern: Attribute, is_optional: bool) -> None:
        self._leaf(pattern.name, pattern.pattern, is_optional, is_attribute=True)

    def visit_element(self, pattern: Element, is_optional: bool) -> None:
        self._leaf(pattern.name, pattern.pattern, is_optional, is_attribute=False)

    def visit_sequence(self, pattern: Sequence, is_optional: bool) -> None:
        for item in pattern.patterns:
            item.accept(self, is_optional)

    def visit_interleave(self, pattern: Interleave, is_optional: bool) -> None:
        for item in pattern.patterns:
            item.accept(self, is_optional)

    def visit_optional(self, pattern: Optional, is_optional: bool) -> None:
        pattern.pattern.accept(self, True)

    def visit_zero_or_more(self, pattern: ZeroOrMore, is_optional: bool) -> None:
        self._collect_repeated(pattern.pattern)

    def visit_one_or_more(self, pattern: OneOrMore, is_optional: bool) -> None:
        self._collect_repeated(pattern.pattern)

    def visit_group(self, pattern: Group, is_optional: bool) -> None:
        pattern.pattern.accept(self, is_optional)

    def _collect_repeated(self, inner: Pattern) -> None:
        # An absent repeated element is an empty collection, never a missing optional
        if isinstance(inner, Element):
            self._leaf(inner.name, inner.pattern, is_optional=False, is_attribute=False, is_vec=True)
        elif isinstance(inner, (Ref, Choice)):
            # Repeated element groups fan out without cardinality
            inner.accept(self, False)


class FieldExtractor:
    """Extracts the de-duplicated field list of a definition pattern."""

    def __init__(self, config: CodegenConfig, names: NameResolver | None = None):
        self.names = names or NameResolver(config)

    def collect_fields(self, pattern: Pattern, fields: list[Field], is_optional: bool = False) -> None:
        """Append the fields of a pattern to `fields`, duplicates included."""
        collector = FieldCollector(self.names)
        pattern.accept(collector, is_optional)
        fields.extend(collector.fields)

    def extract_fields(self, pattern: Pattern) -> list[Field]:
        """
        Extract the fields of a definition pattern.

        Bare Refs and Choices contribute nothing; element groups are parsed
        through their own element-choice parsers.

        Args:
            pattern: The definition pattern

        Returns:
            Fields in first-seen order, de-duplicated by name (first occurrence wins)
        """
        collected: list[Field] = []
        self.collect_fields(pattern, collected)

        fields = []
        seen = set()
        for field in collected:
            if field.name not in seen:
                seen.add(field.name)
                fields.append(field)
        return fields
