"""
Schema AST module.

Contains the pattern node definitions and the schema document parser.
"""

from __future__ import annotations

from .nodes import (
    PATTERN_TYPES,
    Attribute,
    Choice,
    Datatype,
    DatatypeParam,
    Definition,
    Element,
    Empty,
    Group,
    Interleave,
    List,
    Namespace,
    OneOrMore,
    Optional,
    Pattern,
    PatternVisitor,
    QName,
    Ref,
    Schema,
    SchemaError,
    Sequence,
    StringLiteral,
    ZeroOrMore,
)
from .parser import SchemaParser, load_schema

__all__ = [
    "PATTERN_TYPES",
    "Attribute",
    "Choice",
    "Datatype",
    "DatatypeParam",
    "Definition",
    "Element",
    "Empty",
    "Group",
    "Interleave",
    "List",
    "Namespace",
    "OneOrMore",
    "Optional",
    "Pattern",
    "PatternVisitor",
    "QName",
    "Ref",
    "Schema",
    "SchemaError",
    "Sequence",
    "StringLiteral",
    "ZeroOrMore",
    "SchemaParser",
    "load_schema",
]
