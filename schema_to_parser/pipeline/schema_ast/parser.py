"""
Schema document parser that builds the pattern AST.

Phase 1 of the pipeline: read a JSON encoding of an already-parsed
RELAX NG grammar into immutable Pattern nodes. No reference resolution
or classification happens here.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .nodes import (
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
    QName,
    Ref,
    Schema,
    SchemaError,
    Sequence,
    StringLiteral,
    ZeroOrMore,
)


class SchemaParser:
    """Parses a schema document (dict) into a Schema."""

    # Pattern kinds holding a list of child patterns
    MULTI_KINDS = {
        "choice": Choice,
        "sequence": Sequence,
        "interleave": Interleave,
    }

    # Pattern kinds wrapping a single child pattern
    WRAPPER_KINDS = {
        "optional": Optional,
        "zeroOrMore": ZeroOrMore,
        "oneOrMore": OneOrMore,
        "group": Group,
        "list": List,
    }

    # Pattern kinds carrying a name and a content pattern
    NAMED_KINDS = {
        "element": Element,
        "attribute": Attribute,
    }

    def parse(self, document: dict[str, Any]) -> Schema:
        """
        Parse a schema document.

        Args:
            document: Dictionary with "namespaces" and "definitions" keys

        Returns:
            Schema with definitions in document order

        Raises:
            SchemaError: If the document is malformed
        """
        if not isinstance(document, dict):
            raise SchemaError("Schema document must be an object")

        namespaces = tuple(self._parse_namespace(ns, f"#/namespaces/{i}") for i, ns in enumerate(document.get("namespaces", [])))

        definitions = []
        for i, raw in enumerate(document.get("definitions", [])):
            path = f"#/definitions/{i}"
            if not isinstance(raw, dict) or "name" not in raw or "pattern" not in raw:
                raise SchemaError(f"{path}: definition needs 'name' and 'pattern'")
            definitions.append(
                Definition(
                    name=self._require(raw, "name", path, str),
                    pattern=self._parse_pattern(raw["pattern"], f"{path}/pattern"),
                    doc_comment=raw.get("doc"),
                )
            )

        return Schema(definitions=tuple(definitions), namespaces=namespaces)

    def _parse_namespace(self, raw: Any, path: str) -> Namespace:
        if not isinstance(raw, dict) or "prefix" not in raw or "uri" not in raw:
            raise SchemaError(f"{path}: namespace needs 'prefix' and 'uri'")
        return Namespace(prefix=raw["prefix"], uri=raw["uri"], is_default=bool(raw.get("default", False)))

    def _parse_pattern(self, raw: Any, path: str) -> Pattern:
        """
        Parse a pattern object recursively.

        Args:
            raw: The pattern object
            path: Current path in the document (for error messages)

        Returns:
            Appropriate Pattern subclass
        """
        if not isinstance(raw, dict):
            raise SchemaError(f"{path}: pattern must be an object, got {type(raw).__name__}")

        kind = raw.get("type")

        if kind in self.NAMED_KINDS:
            name = self._require(raw, "name", path, str)
            inner = raw.get("pattern", {"type": "empty"})
            return self.NAMED_KINDS[kind](name=QName.parse(name), pattern=self._parse_pattern(inner, f"{path}/pattern"))

        if kind in self.MULTI_KINDS:
            children = self._require(raw, "patterns", path)
            if not isinstance(children, list):
                raise SchemaError(f"{path}/patterns: expected a list")
            return self.MULTI_KINDS[kind](patterns=tuple(self._parse_pattern(child, f"{path}/patterns/{i}") for i, child in enumerate(children)))

        if kind in self.WRAPPER_KINDS:
            inner = self._require(raw, "pattern", path)
            return self.WRAPPER_KINDS[kind](pattern=self._parse_pattern(inner, f"{path}/pattern"))

        match kind:
            case "ref":
                return Ref(name=self._require(raw, "name", path, str))
            case "data":
                raw_params = raw.get("params", {})
                if not isinstance(raw_params, dict):
                    raise SchemaError(f"{path}/params: expected an object, got {type(raw_params).__name__}")
                params = tuple(DatatypeParam(name=k, value=str(v)) for k, v in raw_params.items())
                return Datatype(
                    library=raw.get("library", "xsd"),
                    name=self._require(raw, "name", path, str),
                    params=params,
                )
            case "value":
                return StringLiteral(value=self._require(raw, "value", path, str))
            case "empty":
                return Empty()
            case None:
                raise SchemaError(f"{path}: pattern has no 'type'")
            case _:
                raise SchemaError(f"{path}: unknown pattern type '{kind}'")

    def _require(self, raw: dict[str, Any], key: str, path: str, expected: type | None = None) -> Any:
        if key not in raw:
            raise SchemaError(f"{path}: missing '{key}'")
        value = raw[key]
        if expected is not None and not isinstance(value, expected):
            raise SchemaError(f"{path}/{key}: expected {expected.__name__}, got {type(value).__name__}")
        return value


def load_schema(path: str | Path) -> Schema:
    """
    Load a schema from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        The parsed Schema
    """
    with open(path, encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaError(f"{path}: invalid JSON: {e}") from e
    return SchemaParser().parse(document)
