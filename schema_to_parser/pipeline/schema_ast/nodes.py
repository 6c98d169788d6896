"""
AST node definitions for RELAX NG content models.

These nodes represent a grammar that has already been parsed by an
external collaborator. They are immutable for the lifetime of a
generation pass and reference each other only through named Refs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class SchemaError(Exception):
    """Raised when a schema document or model is structurally invalid.

    This can happen when:
    - A pattern object has an unknown or missing type
    - A required key is missing from a pattern object
    - Two definitions share the same name
    """

    pass


@dataclass(frozen=True)
class QName:
    """Qualified name with optional prefix."""

    local: str
    prefix: str | None = None

    @staticmethod
    def parse(text: str) -> QName:
        """Parse "prefix:local" or "local"."""
        prefix, sep, local = text.partition(":")
        if not sep:
            return QName(local=text)
        return QName(local=local, prefix=prefix)

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local}"
        return self.local


@dataclass(frozen=True)
class Pattern:
    """Base class for all pattern nodes."""

    # Name of the PatternVisitor method handling this node
    VISIT_METHOD = "default"

    def accept(self, visitor: PatternVisitor, *args: Any) -> Any:
        """Dispatch to the visitor method for this pattern kind."""
        return getattr(visitor, self.VISIT_METHOD)(self, *args)


@dataclass(frozen=True)
class Empty(Pattern):
    """Empty content."""

    VISIT_METHOD = "visit_empty"


@dataclass(frozen=True)
class Ref(Pattern):
    """Reference to another definition."""

    VISIT_METHOD = "visit_ref"

    name: str = ""


@dataclass(frozen=True)
class Element(Pattern):
    """`element name { pattern }`."""

    VISIT_METHOD = "visit_element"

    name: QName = field(default_factory=lambda: QName(""))
    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class Attribute(Pattern):
    """`attribute name { pattern }`."""

    VISIT_METHOD = "visit_attribute"

    name: QName = field(default_factory=lambda: QName(""))
    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class Choice(Pattern):
    """`pattern | pattern`."""

    VISIT_METHOD = "visit_choice"

    patterns: tuple[Pattern, ...] = ()


@dataclass(frozen=True)
class Sequence(Pattern):
    """`pattern, pattern`."""

    VISIT_METHOD = "visit_sequence"

    patterns: tuple[Pattern, ...] = ()


@dataclass(frozen=True)
class Interleave(Pattern):
    """`pattern & pattern` (unordered)."""

    VISIT_METHOD = "visit_interleave"

    patterns: tuple[Pattern, ...] = ()


@dataclass(frozen=True)
class Optional(Pattern):
    """`pattern?`."""

    VISIT_METHOD = "visit_optional"

    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class ZeroOrMore(Pattern):
    """`pattern*`."""

    VISIT_METHOD = "visit_zero_or_more"

    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class OneOrMore(Pattern):
    """`pattern+`."""

    VISIT_METHOD = "visit_one_or_more"

    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class Group(Pattern):
    """Parenthesized pattern."""

    VISIT_METHOD = "visit_group"

    pattern: Pattern = field(default_factory=Empty)


@dataclass(frozen=True)
class DatatypeParam:
    """Datatype parameter: `{ length = "4" }`."""

    name: str
    value: str


@dataclass(frozen=True)
class Datatype(Pattern):
    """Datatype reference: `xsd:integer`, `xsd:string`, etc."""

    VISIT_METHOD = "visit_datatype"

    library: str = ""
    name: str = ""
    params: tuple[DatatypeParam, ...] = ()


@dataclass(frozen=True)
class StringLiteral(Pattern):
    """String literal: `string "value"`."""

    VISIT_METHOD = "visit_string_literal"

    value: str = ""


@dataclass(frozen=True)
class List(Pattern):
    """`list { pattern }` (space-separated)."""

    VISIT_METHOD = "visit_list"

    pattern: Pattern = field(default_factory=Empty)


# All concrete pattern kinds, in declaration order
PATTERN_TYPES: tuple[type[Pattern], ...] = (
    Element,
    Attribute,
    Choice,
    Sequence,
    Interleave,
    Optional,
    ZeroOrMore,
    OneOrMore,
    Group,
    Ref,
    Datatype,
    StringLiteral,
    List,
    Empty,
)


class PatternVisitor:
    """Visitor over the Pattern IR.

    Every variant has its own method; unless overridden, each one falls
    back to `default`.
    """

    def default(self, pattern: Pattern, *args: Any) -> Any:
        return None

    def visit_element(self, pattern: Element, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_attribute(self, pattern: Attribute, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_choice(self, pattern: Choice, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_sequence(self, pattern: Sequence, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_interleave(self, pattern: Interleave, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_optional(self, pattern: Optional, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_zero_or_more(self, pattern: ZeroOrMore, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_one_or_more(self, pattern: OneOrMore, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_group(self, pattern: Group, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_ref(self, pattern: Ref, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_datatype(self, pattern: Datatype, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_string_literal(self, pattern: StringLiteral, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_list(self, pattern: List, *args: Any) -> Any:
        return self.default(pattern, *args)

    def visit_empty(self, pattern: Empty, *args: Any) -> Any:
        return self.default(pattern, *args)


@dataclass(frozen=True)
class Namespace:
    """Namespace declaration: `namespace prefix = "uri"`."""

    prefix: str
    uri: str
    is_default: bool = False


@dataclass(frozen=True)
class Definition:
    """A named definition: `name = pattern`."""

    name: str
    pattern: Pattern
    doc_comment: str | None = None


@dataclass(frozen=True)
class Schema:
    """A complete schema: namespaces and name-unique definitions in declaration order."""

    definitions: tuple[Definition, ...] = ()
    namespaces: tuple[Namespace, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for definition in self.definitions:
            if definition.name in seen:
                raise SchemaError(f"Duplicate definition: {definition.name}")
            seen.add(definition.name)

    def definition_map(self) -> dict[str, Pattern]:
        """Map definition names to their patterns."""
        return {d.name: d.pattern for d in self.definitions}

    def definition(self, name: str) -> Definition | None:
        """Look up a definition by name."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None

    def merged(self, other: Schema) -> Schema:
        """
        Combine this schema with another one.

        Namespaces are de-duplicated by prefix (first declaration wins).
        Definitions of `other` replace same-named definitions in place;
        new ones are appended in their declaration order.

        Args:
            other: Schema whose definitions take precedence

        Returns:
            A new Schema
        """
        namespaces = list(self.namespaces)
        prefixes = {ns.prefix for ns in namespaces}
        for ns in other.namespaces:
            if ns.prefix not in prefixes:
                namespaces.append(ns)
                prefixes.add(ns.prefix)

        overrides = {d.name: d for d in other.definitions}
        definitions = [overrides.pop(d.name, d) for d in self.definitions]
        definitions.extend(d for d in other.definitions if d.name in overrides)

        return Schema(definitions=tuple(definitions), namespaces=tuple(namespaces))
