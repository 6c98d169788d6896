"""
Rust parser generation backend.

Generates quick-xml event-based `FromXml` implementations for the
complex types and element groups of a schema.
"""

from __future__ import annotations

import logging
from typing import Any

from ..analyzer.classifier import XSD_BINARY_DATATYPES, ParseStrategy
from ..analyzer.field_extractor import Field
from ..schema_ast.nodes import (
    Choice,
    Datatype,
    Definition,
    Element,
    OneOrMore,
    Optional,
    Pattern,
    Ref,
    ZeroOrMore,
)
from .base import ParserBackend

logger = logging.getLogger(__name__)

# Integer and floating point XSD datatypes, coerced leniently with FromStr
XSD_NUMERIC_DATATYPES = {
    "integer",
    "int",
    "long",
    "short",
    "byte",
    "unsignedInt",
    "unsignedLong",
    "unsignedShort",
    "unsignedByte",
    "double",
    "float",
    "decimal",
}

# Attribute spellings accepted as true for xsd:boolean
TRUTHY_LITERALS = ("true", "1")

LENIENT_PARSE_EXPR = "val.parse().ok()"
TEXT_EXPR = "Some(val.into_owned())"


class RustParserBackend(ParserBackend):
    """Rust (quick-xml) parser generation backend."""

    TEMPLATE_LANG = "rust"
    FILE_EXTENSION = "rs"

    @property
    def eof_arm(self) -> str:
        """Match arm for end-of-stream inside an element."""
        if self.config.strict_eof:
            return "Event::Eof => return Err(ParseError::UnexpectedEof),"
        return "Event::Eof => break,"

    def gen_prologue(self, generation_comment: str = "") -> str:
        """Generate the shared prologue (error type, FromXml trait, helpers)."""
        return self.prologue_template.render(
            generation_comment=generation_comment,
            types_import=self.config.types_import,
            cross_crate_imports=self.config.cross_crate_imports,
            preserve_unknown=self.config.preserve_unknown,
            strict_eof=self.config.strict_eof,
            eof_arm=self.eof_arm,
        )

    # ------------------------------------------------------------------
    # Element groups
    # ------------------------------------------------------------------

    def gen_element_group_parser(self, definition: Definition) -> str | None:
        """Generate a parser dispatching on the element's own tag name."""
        if not isinstance(definition.pattern, Choice):
            return None

        variants = []
        for variant in definition.pattern.patterns:
            element = self._extract_element_variant(variant)
            if element is not None:
                variants.append(self._prepare_variant_context(element))

        if not variants:
            logger.debug("Element group %s has no element variants", definition.name)
            return None

        return self.element_group_template.render(
            type_name=self.names.type_name(definition.name),
            variants=variants,
        )

    def _extract_element_variant(self, pattern: Pattern) -> Element | None:
        match pattern:
            case Element():
                return pattern
            case Optional(pattern=inner) | ZeroOrMore(pattern=inner) | OneOrMore(pattern=inner):
                return self._extract_element_variant(inner)
            case _:
                return None

    def _prepare_variant_context(self, element: Element) -> dict[str, Any]:
        """
        Prepare the template context for one element-group arm.

        Args:
            element: The element variant

        Returns:
            Dictionary of template variables
        """
        type_info = self.classifier.pattern_to_rust_type(element.pattern)
        strategy = self.classifier.parse_strategy(element.pattern)

        if strategy == ParseStrategy.FROM_XML:
            actual_type, alias_boxed = self.classifier.resolve_from_xml_type(element.pattern)
            inner_expr = f"{actual_type or type_info.type_name}::from_xml(reader, start_tag, is_empty)?"
            if alias_boxed:
                inner_expr = f"Box::new({inner_expr})"
        else:
            # The tag's emptiness is only known at runtime here
            inner_expr = f"if is_empty {{ {self._text_value_expr(strategy, True)} }} else {{ {self._text_value_expr(strategy, False)} }}"

        return {
            "xml_name": element.name.local,
            "variant_name": self.names.variant_name(element.name.local),
            "inner_expr": inner_expr,
            "wrapped": "Box::new(inner)" if type_info.needs_indirection else "inner",
        }

    # ------------------------------------------------------------------
    # Structs
    # ------------------------------------------------------------------

    def gen_struct_parser(self, definition: Definition) -> str | None:
        """Generate a parser filling the fields of a struct."""
        type_name = self.names.type_name(definition.name)
        fields = self.extractor.extract_fields(definition.pattern)

        if not fields:
            return self.empty_struct_template.render(type_name=type_name)

        field_contexts = [self._prepare_field_context(f, type_name) for f in fields]

        return self.struct_template.render(
            type_name=type_name,
            fields=field_contexts,
            attr_fields=[ctx for ctx in field_contexts if ctx["is_attribute"]],
            elem_fields=[ctx for ctx in field_contexts if not ctx["is_attribute"]],
            preserve_unknown=self.config.preserve_unknown,
            eof_arm=self.eof_arm,
        )

    def _prepare_field_context(self, field: Field, type_name: str) -> dict[str, Any]:
        """
        Prepare the template context for a field.

        Args:
            field: The field
            type_name: Name of the generated struct (for feature lookups)

        Returns:
            Dictionary of template variables
        """
        var = self.names.slot_variable(field.name)
        feature = self._field_feature(type_name, field.xml_name)

        if field.is_vec:
            declaration = f"let mut {var} = Vec::new();"
        elif field.is_optional:
            declaration = f"let mut {var} = None;"
        else:
            type_info = self.classifier.pattern_to_rust_type(field.pattern)
            declaration = f"let mut {var}: Option<{type_info.field_type}> = None;"

        if field.is_optional or field.is_vec:
            assignment = f"{field.name}: {var}"
        else:
            assignment = f'{field.name}: {var}.ok_or_else(|| ParseError::MissingAttribute("{field.xml_name}".to_string()))?'

        ctx = {
            "var": var,
            "xml_name": field.xml_name,
            "is_attribute": field.is_attribute,
            "feature": feature,
            "cfg_inline": f'#[cfg(feature = "{feature}")] ' if feature else "",
            "declaration": declaration,
            "assignment": assignment,
        }

        if field.is_attribute:
            ctx["parse_expr"] = self.gen_attr_parse_expr(field.pattern)
        else:
            ctx["start_stmt"] = self._store_stmt(field, var, self.gen_element_parse_code(field, False))
            ctx["empty_stmt"] = self._store_stmt(field, var, self.gen_element_parse_code(field, True))

        return ctx

    def _store_stmt(self, field: Field, var: str, expr: str) -> str:
        if field.is_vec:
            return f"{var}.push({expr});"
        return f"{var} = Some({expr});"

    def _field_feature(self, type_name: str, xml_name: str) -> str | None:
        """Get the cargo feature gating a field, if any."""
        mappings = self.config.feature_mappings
        if mappings is None:
            return None
        feature = mappings.primary_feature(self.config.module_name, type_name, xml_name)
        if feature is None:
            return None
        return f"{self.config.module_name}-{feature}"

    # ------------------------------------------------------------------
    # Value expressions
    # ------------------------------------------------------------------

    def gen_attr_parse_expr(self, pattern: Pattern, _seen: frozenset[str] = frozenset()) -> str:
        """
        Generate the expression coercing an attribute value (`val`) to an Option.

        Malformed numbers and enum values become None instead of raising.
        """
        xsd = self.config.conventions.xsd_library
        match pattern:
            case Datatype(library=library, name=name) if library == xsd:
                if name == "boolean":
                    checks = " || ".join(f'val == "{literal}"' for literal in TRUTHY_LITERALS)
                    return f"Some({checks})"
                if name in XSD_NUMERIC_DATATYPES:
                    return LENIENT_PARSE_EXPR
                if name in XSD_BINARY_DATATYPES:
                    return "decode_hex(&val)"
                return TEXT_EXPR
            case Ref(name=name):
                target = self.classifier.definitions.get(name)
                if target is not None and name not in _seen:
                    return self.gen_attr_parse_expr(target, _seen | {name})
                # Unknown ref: enums from another schema still implement FromStr
                if self.config.conventions.is_simple_type(name):
                    return LENIENT_PARSE_EXPR
                return TEXT_EXPR
            case Choice() if self.classifier.is_simple_type(pattern):
                return LENIENT_PARSE_EXPR
            case _:
                return TEXT_EXPR

    def gen_element_parse_code(self, field: Field, is_empty_element: bool) -> str:
        """
        Generate the expression producing the value of a child element.

        Args:
            field: The element field
            is_empty_element: Whether the child was self-closing (Event::Empty)

        Returns:
            Expression source text, using `e` as the child start tag
        """
        type_info = self.classifier.pattern_to_rust_type(field.pattern)
        strategy = self.classifier.parse_strategy(field.pattern)

        if strategy == ParseStrategy.FROM_XML:
            actual_type, alias_boxed = self.classifier.resolve_from_xml_type(field.pattern)
            expr = f"{actual_type or type_info.type_name}::from_xml(reader, &e, {str(is_empty_element).lower()})?"
            # `type X = Box<Y>` aliases need their own Box
            if alias_boxed:
                expr = f"Box::new({expr})"
        else:
            expr = self._text_value_expr(strategy, is_empty_element)

        if type_info.needs_indirection:
            expr = f"Box::new({expr})"
        return expr

    def _text_value_expr(self, strategy: ParseStrategy, is_empty_element: bool) -> str:
        """Expression reading a text-valued child element."""
        if strategy == ParseStrategy.TEXT_FROM_STR:
            if is_empty_element:
                return "Default::default()"
            return "{ let text = read_text_content(reader)?; text.parse().map_err(|_| ParseError::InvalidValue(text))? }"
        if strategy == ParseStrategy.TEXT_HEX_BINARY:
            if is_empty_element:
                return "Vec::new()"
            return "{ let text = read_text_content(reader)?; decode_hex(&text).unwrap_or_default() }"
        if is_empty_element:
            return "String::new()"
        return "read_text_content(reader)?"
