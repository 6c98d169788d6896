#!/usr/bin/env python3

import pytest

from schema_to_parser.pipeline.backends import RustParserBackend
from schema_to_parser.pipeline.config import CodegenConfig, FeatureMappings
from schema_to_parser.pipeline.schema_ast import (
    Attribute,
    Datatype,
    Definition,
    Element,
    Empty,
    Optional,
    QName,
    Ref,
    Schema,
    Sequence,
    ZeroOrMore,
)

CT_BAR = Definition("w_CT_Bar", Sequence(patterns=(Attribute(QName("val", "w"), Datatype("xsd", "string")),)))
CT_FOO = Definition(
    "w_CT_Foo",
    Sequence(
        patterns=(
            Attribute(QName("id", "w"), Datatype("xsd", "integer")),
            Element(QName("name", "w"), Ref("w_CT_Bar")),
        )
    ),
)


def make_backend(*definitions, **config):
    return RustParserBackend(Schema(definitions=definitions), CodegenConfig(**config))


def test_empty_struct_accepts_both_forms():
    empty = Definition("w_CT_Empty", Empty())
    code = make_backend(empty).gen_struct_parser(empty)

    assert "impl FromXml for CTEmpty {" in code
    assert "if !is_empty {\n            skip_element(reader)?;\n        }" in code
    assert "Ok(Self {})" in code
    assert "Err(" not in code


def test_complex_type_scenario():
    code = make_backend(CT_BAR, CT_FOO).gen_struct_parser(CT_FOO)

    expected_contains = [
        "impl FromXml for CTFoo {",
        # Nullable slot for the attribute, filled leniently
        "let mut f_id: Option<i64> = None;",
        'b"id" => {\n                    f_id = val.parse().ok();',
        # Boxed slot for the complex child
        "let mut f_name: Option<Box<CTBar>> = None;",
        "f_name = Some(Box::new(CTBar::from_xml(reader, &e, false)?));",
        "f_name = Some(Box::new(CTBar::from_xml(reader, &e, true)?));",
        # Required fields report their XML name
        'id: f_id.ok_or_else(|| ParseError::MissingAttribute("id".to_string()))?,',
        'name: f_name.ok_or_else(|| ParseError::MissingAttribute("name".to_string()))?,',
        "Event::End(_) => break,",
        "Event::Eof => break,",
    ]
    for expected in expected_contains:
        assert expected in code, f"Expected '{expected}' not found in generated code"


def test_unknown_children_are_skipped():
    code = make_backend(CT_BAR, CT_FOO).gen_struct_parser(CT_FOO)

    assert "match e.local_name().as_ref() {" in code
    assert "_ => {\n                                skip_element(reader)?;\n                            }" in code
    # Self-closing children have no content to skip
    assert code.count("skip_element(reader)?;") == 1


def test_attribute_only_struct_reads_to_end():
    code = make_backend(CT_BAR).gen_struct_parser(CT_BAR)

    assert "// Parse attributes" in code
    assert "// Parse child elements" not in code
    assert "Event::Start(_) => skip_element(reader)?," in code


def test_vec_and_optional_fields():
    definition = Definition(
        "w_CT_List",
        Sequence(
            patterns=(
                Optional(Attribute(QName("count"), Datatype("xsd", "unsignedInt"))),
                ZeroOrMore(Element(QName("item", "w"), Ref("w_CT_Bar"))),
            )
        ),
    )
    code = make_backend(CT_BAR, definition).gen_struct_parser(definition)

    assert "let mut f_count = None;" in code
    assert "let mut f_item = Vec::new();" in code
    assert "f_item.push(Box::new(CTBar::from_xml(reader, &e, false)?));" in code
    assert "count: f_count," in code
    assert "item: f_item," in code
    assert "MissingAttribute" not in code


def test_element_alias_child_calls_inner_parser():
    bar_element = Definition("w_bar", Element(QName("bar", "w"), Ref("w_CT_Bar")))
    definition = Definition("w_CT_Holder", Optional(Element(QName("bar", "w"), Ref("w_bar"))))
    code = make_backend(CT_BAR, bar_element, definition).gen_struct_parser(definition)

    assert "f_bar = Some(Box::new(CTBar::from_xml(reader, &e, false)?));" in code


def test_feature_gated_fields():
    features = FeatureMappings.from_dict({"wml": {"CTFoo": {"id": ["ids"], "name": ["core"]}}})
    code = make_backend(CT_BAR, CT_FOO, module_name="wml", feature_mappings=features).gen_struct_parser(CT_FOO)

    assert '#[cfg(feature = "wml-ids")] let mut f_id: Option<i64> = None;' in code
    assert '#[cfg(feature = "wml-ids")]\n                b"id" => {' in code
    assert '#[cfg(feature = "wml-ids")]\n            id: f_id' in code
    # Core fields are never gated
    assert "let mut f_name: Option<Box<CTBar>> = None;" in code
    assert code.count("#[cfg(feature") == 3


def test_type_name_override():
    class Naming:
        def resolve_type(self, module, raw_name):
            return {"CT_Foo": "Foo", "CT_Bar": "Bar"}.get(raw_name)

        def resolve_variant(self, module, raw_name):
            return None

        def resolve_field(self, module, raw_name):
            return {"name": "label"}.get(raw_name)

    code = make_backend(CT_BAR, CT_FOO, name_mappings=Naming()).gen_struct_parser(CT_FOO)

    assert "impl FromXml for Foo {" in code
    assert "let mut f_label: Option<Box<Bar>> = None;" in code
    assert 'b"name" => {' in code
    assert 'label: f_label.ok_or_else(|| ParseError::MissingAttribute("name".to_string()))?' in code


if __name__ == "__main__":
    pytest.main([__file__])
