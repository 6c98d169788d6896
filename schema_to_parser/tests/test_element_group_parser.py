#!/usr/bin/env python3

import pytest

from schema_to_parser.pipeline.backends import RustParserBackend
from schema_to_parser.pipeline.config import CodegenConfig
from schema_to_parser.pipeline.schema_ast import (
    Choice,
    Datatype,
    Definition,
    Element,
    Empty,
    OneOrMore,
    QName,
    Ref,
    Schema,
    Sequence,
    StringLiteral,
    ZeroOrMore,
)

CT_TEXT = Definition("w_CT_Text", Sequence())
CT_EMPTY = Definition("w_CT_Empty", Empty())
EG_RUN = Definition(
    "w_EG_RunContent",
    Choice(
        patterns=(
            Element(QName("t", "w"), Ref("w_CT_Text")),
            Element(QName("br", "w"), Ref("w_CT_Empty")),
            ZeroOrMore(Element(QName("tab", "w"), Ref("w_CT_Empty"))),
        )
    ),
)


def make_backend(*definitions, **config):
    return RustParserBackend(Schema(definitions=definitions), CodegenConfig(**config))


def test_three_variants_three_arms_and_fallback():
    code = make_backend(CT_TEXT, CT_EMPTY, EG_RUN).gen_element_group_parser(EG_RUN)

    assert "impl FromXml for EGRunContent {" in code
    assert "let tag = start_tag.local_name();" in code
    assert code.count(" => {\n                let inner = ") == 3
    assert code.count("_ => Err(ParseError::UnexpectedElement(") == 1

    expected_arms = [
        ('b"t"', "CTText::from_xml(reader, start_tag, is_empty)?", "Self::T(Box::new(inner))"),
        ('b"br"', "CTEmpty::from_xml(reader, start_tag, is_empty)?", "Self::Br(Box::new(inner))"),
        ('b"tab"', "CTEmpty::from_xml(reader, start_tag, is_empty)?", "Self::Tab(Box::new(inner))"),
    ]
    for tag, call, construct in expected_arms:
        arm = f"{tag} => {{\n                let inner = {call};\n                Ok({construct})\n            }}"
        assert arm in code, f"Arm for {tag} not found in generated code"


def test_fallback_reports_raw_tag():
    code = make_backend(CT_TEXT, CT_EMPTY, EG_RUN).gen_element_group_parser(EG_RUN)
    assert "String::from_utf8_lossy(start_tag.name().as_ref()).into_owned()" in code


def test_text_variant_is_not_boxed():
    definition = Definition(
        "w_EG_Values",
        Choice(
            patterns=(
                Element(QName("num"), Datatype("xsd", "int")),
                OneOrMore(Element(QName("label"), Datatype("xsd", "string"))),
            )
        ),
    )
    code = make_backend(definition).gen_element_group_parser(definition)

    assert (
        "let inner = if is_empty { Default::default() } else { { let text = read_text_content(reader)?; "
        "text.parse().map_err(|_| ParseError::InvalidValue(text))? } };" in code
    )
    assert "let inner = if is_empty { String::new() } else { read_text_content(reader)? };" in code
    assert "Ok(Self::Num(inner))" in code
    assert "Ok(Self::Label(inner))" in code


def test_non_element_variants_are_ignored():
    definition = Definition(
        "w_EG_Mixed",
        Choice(patterns=(Ref("w_EG_Other"), StringLiteral("x"), Element(QName("p"), Ref("w_CT_Empty")))),
    )
    code = make_backend(CT_EMPTY, definition).gen_element_group_parser(definition)

    assert code.count("let inner = ") == 1
    assert 'b"p" => {' in code


def test_no_element_variants_emits_nothing():
    definition = Definition("w_EG_Refs", Choice(patterns=(Ref("a"), Ref("b"))))
    assert make_backend(definition).gen_element_group_parser(definition) is None


def test_non_choice_emits_nothing():
    definition = Definition("w_EG_Seq", Sequence(patterns=(Element(QName("p")),)))
    assert make_backend(definition).gen_element_group_parser(definition) is None


def test_variant_name_override():
    class Naming:
        def resolve_type(self, module, raw_name):
            return None

        def resolve_variant(self, module, raw_name):
            return {"t": "Text"}.get(raw_name)

        def resolve_field(self, module, raw_name):
            return None

    code = make_backend(CT_TEXT, CT_EMPTY, EG_RUN, name_mappings=Naming()).gen_element_group_parser(EG_RUN)

    assert "Ok(Self::Text(Box::new(inner)))" in code
    assert "Ok(Self::Br(Box::new(inner)))" in code


if __name__ == "__main__":
    pytest.main([__file__])
