"""
Type classifier for schema patterns.

Decides simple vs. complex, element group vs. struct, the concrete
target type of a sub-pattern and whether it needs heap indirection.
Every function here is total: unresolved references degrade to text
instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..config import CodegenConfig
from ..schema_ast.nodes import (
    Choice,
    Datatype,
    Element,
    Empty,
    List,
    OneOrMore,
    Optional,
    Pattern,
    Ref,
    Schema,
    StringLiteral,
    ZeroOrMore,
)
from .name_resolver import NameResolver

TEXT_TYPE = "String"

# XSD datatype name -> Rust scalar type
XSD_SCALAR_TYPES = {
    "string": "String",
    "integer": "i64",
    "int": "i32",
    "long": "i64",
    "short": "i16",
    "byte": "i8",
    "unsignedInt": "u32",
    "unsignedLong": "u64",
    "unsignedShort": "u16",
    "unsignedByte": "u8",
    "boolean": "bool",
    "double": "f64",
    "float": "f32",
    "decimal": "f64",
}

# XSD datatypes read as plain text when they are element content
XSD_TEXT_DATATYPES = {"string", "token", "NCName", "ID", "IDREF", "anyURI", "dateTime", "date", "time"}

# XSD datatypes decoded from hex text
XSD_BINARY_DATATYPES = {"hexBinary", "base64Binary"}


class ParseStrategy(Enum):
    """How the value of a child element is read."""

    FROM_XML = "from_xml"  # Nested FromXml parser (complex types and element groups)
    TEXT_FROM_STR = "text_from_str"  # Text content parsed with FromStr (enums, numbers)
    TEXT_STRING = "text_string"  # Text content as String
    TEXT_HEX_BINARY = "text_hex_binary"  # Text content decoded as hex


@dataclass(frozen=True)
class TypeInfo:
    """Concrete target type of a pattern and its ownership decision."""

    type_name: str
    needs_indirection: bool = False

    @property
    def field_type(self) -> str:
        """Type as stored in a field: boxed when indirection is needed."""
        if self.needs_indirection:
            return f"Box<{self.type_name}>"
        return self.type_name


def xsd_to_rust(library: str, name: str, xsd_library: str = "xsd") -> str:
    """Map a datatype to a Rust scalar type, defaulting to text."""
    if library != xsd_library:
        return TEXT_TYPE
    return XSD_SCALAR_TYPES.get(name, TEXT_TYPE)


def unwrap_repetition(pattern: Pattern) -> Pattern:
    """Strip Optional/ZeroOrMore/OneOrMore wrappers."""
    while isinstance(pattern, (Optional, ZeroOrMore, OneOrMore)):
        pattern = pattern.pattern
    return pattern


class TypeClassifier:
    """Classifies patterns against the definitions of one schema."""

    def __init__(self, schema: Schema, config: CodegenConfig, names: NameResolver | None = None):
        """
        Initialize the classifier.

        Args:
            schema: The schema whose definitions resolve Refs
            config: Code generation configuration
            names: Name resolver (created from config when omitted)
        """
        self.schema = schema
        self.config = config
        self.conventions = config.conventions
        self.names = names or NameResolver(config)
        self.definitions = schema.definition_map()
        self._simple_cache: dict[str, bool] = {}

    def is_simple_type(self, pattern: Pattern) -> bool:
        """Whether a pattern is a scalar/text value rather than a structure."""
        match pattern:
            case StringLiteral() | Datatype() | List():
                return True
            case Choice(patterns=variants):
                return all(isinstance(v, StringLiteral) for v in variants)
            case Ref(name=name):
                return self._is_simple_ref(name)
            case _:
                return False

    def _is_simple_ref(self, name: str) -> bool:
        if name in self._simple_cache:
            return self._simple_cache[name]
        target = self.definitions.get(name)
        if target is None:
            return False
        # A Ref cycle never reaches a scalar
        self._simple_cache[name] = False
        result = self.is_simple_type(target)
        self._simple_cache[name] = result
        return result

    def is_element_choice(self, pattern: Pattern) -> bool:
        """Whether a pattern is a Choice with at least one direct Element variant."""
        if not isinstance(pattern, Choice):
            return False
        return any(isinstance(unwrap_repetition(v), Element) for v in pattern.patterns)

    def is_type_alias(self, pattern: Pattern, _seen: frozenset[str] = frozenset()) -> bool:
        """
        Whether a definition pattern produces a type alias rather than a struct.

        Element wrappers and datatypes are aliases; Refs are aliases when they
        resolve to a simple type or another alias. Unknown Refs (from another
        schema) produce empty structs and are not aliases.
        """
        match pattern:
            case Element() | Datatype():
                return True
            case Ref(name=name):
                target = self.definitions.get(name)
                if target is None or name in _seen:
                    return False
                return self.is_simple_type(target) or self.is_type_alias(target, _seen | {name})
            case _:
                return False

    def has_parser(self, name: str, pattern: Pattern) -> bool:
        """Whether a definition gets a standalone FromXml implementation."""
        if self.conventions.is_simple_type(name):
            return False
        return not self.is_simple_type(pattern) and not self.is_type_alias(pattern)

    def pattern_to_rust_type(self, pattern: Pattern) -> TypeInfo:
        """
        Determine the concrete type of a pattern and whether it needs indirection.

        Refs to complex types and element groups are boxed to break recursive
        type cycles. Everything unresolved degrades to text.
        """
        match pattern:
            case Ref(name=name):
                if name not in self.definitions:
                    return TypeInfo(TEXT_TYPE)
                needs_box = self.conventions.is_complex_type(name) or self.conventions.is_element_group(name)
                return TypeInfo(self.names.type_name(name), needs_box)
            case Datatype(library=library, name=name):
                return TypeInfo(xsd_to_rust(library, name, self.conventions.xsd_library))
            case _:
                return TypeInfo(TEXT_TYPE)

    def parse_strategy(self, pattern: Pattern, _seen: frozenset[str] = frozenset()) -> ParseStrategy:
        """Determine how a child element holding this pattern is read."""
        match pattern:
            case Ref(name=name):
                target = self.definitions.get(name)
                if target is not None:
                    if name in _seen or self.has_parser(name, target):
                        return ParseStrategy.FROM_XML
                    # Alias of a ref from another schema: an empty struct with its own parser
                    if isinstance(target, Ref) and target.name not in self.definitions:
                        return ParseStrategy.FROM_XML
                    return self.parse_strategy(target, _seen | {name})
                if self.conventions.is_complex_type(name) or self.conventions.is_element_group(name):
                    return ParseStrategy.FROM_XML
                return ParseStrategy.TEXT_STRING
            case Element(pattern=inner):
                return self.parse_strategy(inner, _seen)
            case Datatype(library=library, name=name):
                if library != self.conventions.xsd_library or name in XSD_TEXT_DATATYPES:
                    return ParseStrategy.TEXT_STRING
                if name in XSD_BINARY_DATATYPES:
                    return ParseStrategy.TEXT_HEX_BINARY
                return ParseStrategy.TEXT_FROM_STR
            case Choice() if self.is_simple_type(pattern):
                return ParseStrategy.TEXT_FROM_STR
            case StringLiteral() | Empty() | List():
                return ParseStrategy.TEXT_STRING
            case _:
                return ParseStrategy.FROM_XML

    def resolve_from_xml_type(self, pattern: Pattern, _seen: frozenset[str] = frozenset()) -> tuple[str | None, bool]:
        """
        Resolve a pattern to the type owning the FromXml implementation.

        Element-alias definitions generate `type X = Box<Inner>`, so the parser
        of Inner is called and the alias box is reported.

        Returns:
            (type name or None when no better type than the field type is known,
             whether the alias already carries a Box)
        """
        if not isinstance(pattern, Ref) or pattern.name in _seen:
            return None, False

        target = self.definitions.get(pattern.name)
        seen = _seen | {pattern.name}
        if isinstance(target, Element):
            inner_type = self._resolve_alias_target(target.pattern, seen)
            if inner_type is not None:
                return inner_type, True
        if isinstance(target, Ref):
            if target.name not in self.definitions:
                # External ref such as r_id; keep the field type
                return None, False
            return self.resolve_from_xml_type(target, seen)
        return self.names.type_name(pattern.name), False

    def _resolve_alias_target(self, pattern: Pattern, seen: frozenset[str]) -> str | None:
        if not isinstance(pattern, Ref) or pattern.name in seen:
            return None
        target = self.definitions.get(pattern.name)
        seen = seen | {pattern.name}
        if isinstance(target, Element):
            return self._resolve_alias_target(target.pattern, seen)
        if isinstance(target, Ref):
            if target.name not in self.definitions:
                return None
            return self._resolve_alias_target(target, seen)
        return self.names.type_name(pattern.name)
