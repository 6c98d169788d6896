#!/usr/bin/env python3

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from schema_to_parser.schema_to_parser import schema_to_parser

TEST_DATA = Path(__file__).parent / "test_data"
SAMPLE = str(TEST_DATA / "wml_sample.json")


@pytest.fixture
def runner():
    return CliRunner()


def test_generates_output(runner, tmp_path):
    output = tmp_path / "parsers.rs"

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output), "-m", "wml"])

    assert result.exit_code == 0, result.output
    code = output.read_text()
    assert code.startswith("// Generated by schema_to_parser v")
    assert "impl FromXml for CTBody {" in code


def test_generation_comment_reconstructs_command(runner, tmp_path):
    output = tmp_path / "parsers.rs"

    runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output), "--module", "wml", "--strict-eof"])

    first_line = output.read_text().splitlines()[0]
    assert first_line.endswith(f"schema_to_parser wml_sample.json --output {output.resolve()} --module wml --strict-eof")


def test_refuses_to_overwrite(runner, tmp_path):
    output = tmp_path / "parsers.rs"
    output.write_text("// keep\n")

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output)])

    assert result.exit_code == 1
    assert "Output file already exists" in result.output
    assert output.read_text() == "// keep\n"


def test_force_overwrites(runner, tmp_path):
    output = tmp_path / "parsers.rs"
    output.write_text("// old\n")

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output), "--force"])

    assert result.exit_code == 0, result.output
    assert "impl FromXml for CTBody" in output.read_text()


def test_mapping_files(runner, tmp_path):
    output = tmp_path / "parsers.rs"

    result = runner.invoke(
        schema_to_parser,
        [
            SAMPLE,
            "-o",
            str(output),
            "-m",
            "wml",
            "--name-mappings",
            str(TEST_DATA / "name_mappings.yaml"),
            "--feature-mappings",
            str(TEST_DATA / "feature_mappings.yaml"),
        ],
    )

    assert result.exit_code == 0, result.output
    code = output.read_text()
    assert "impl FromXml for Paragraph {" in code
    assert '#[cfg(feature = "wml-formatting")]' in code


def test_config_file(runner, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"module_name": "wml", "strict_eof": True, "add_generation_comment": False}))
    output = tmp_path / "parsers.rs"

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output), "-c", str(config_path)])

    assert result.exit_code == 0, result.output
    code = output.read_text()
    assert code.startswith("// Event-based parsers for generated types.")
    assert "UnexpectedEof" in code


def test_config_file_mapping_paths_relative_to_config(runner, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"module_name": "wml", "name_mappings": "names.yaml"}))
    (tmp_path / "names.yaml").write_text((TEST_DATA / "name_mappings.yaml").read_text())
    output = tmp_path / "parsers.rs"

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(output), "-c", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "impl FromXml for Body {" in output.read_text()


def test_config_file_bad_mapping_reports_error(runner, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"name_mappings": 42}))

    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(tmp_path / "out.rs"), "-c", str(config_path)])

    assert result.exit_code == 1
    assert "name_mappings: expected a mapping or a file path, got int" in result.output
    assert not (tmp_path / "out.rs").exists()


def test_report_lists_unmapped_names(runner, tmp_path):
    output = tmp_path / "parsers.rs"

    result = runner.invoke(
        schema_to_parser,
        [
            SAMPLE,
            "-o",
            str(output),
            "-m",
            "wml",
            "--name-mappings",
            str(TEST_DATA / "name_mappings.yaml"),
            "--feature-mappings",
            str(TEST_DATA / "feature_mappings.yaml"),
            "--report",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Module 'wml': 7 types (4 unmapped), 11 fields (8 unmapped)" in result.output
    assert "    - CT_ParaProps" in result.output
    assert "    - Body.sectPr" in result.output
    assert output.exists()


def test_report_without_mappings(runner, tmp_path):
    result = runner.invoke(schema_to_parser, [SAMPLE, "-o", str(tmp_path / "parsers.rs"), "-m", "wml", "--report"])

    assert result.exit_code == 0, result.output
    assert "Module 'wml': 7 types, 11 fields, all mapped" in result.output


def test_multiple_schemas_are_merged(runner, tmp_path):
    extra = tmp_path / "extra.json"
    extra.write_text(
        json.dumps(
            {
                "definitions": [
                    {"name": "w_CT_Empty", "pattern": {"type": "attribute", "name": "w:val", "pattern": {"type": "data", "name": "string"}}},
                    {"name": "w_CT_Extra", "pattern": {"type": "empty"}},
                ]
            }
        )
    )
    output = tmp_path / "parsers.rs"

    result = runner.invoke(schema_to_parser, [SAMPLE, str(extra), "-o", str(output)])

    assert result.exit_code == 0, result.output
    code = output.read_text()
    assert code.index("impl FromXml for CTEmpty") < code.index("impl FromXml for CTText")
    assert 'b"val" => {' in code.split("impl FromXml for CTEmpty")[1].split("impl FromXml")[0]
    assert "impl FromXml for CTExtra" in code.split("impl FromXml for CTBody")[1]


def test_invalid_schema_reports_error(runner, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"definitions": [{"name": "a", "pattern": {"type": "bogus"}}]}))

    result = runner.invoke(schema_to_parser, [str(broken), "-o", str(tmp_path / "out.rs")])

    assert result.exit_code == 1
    assert "unknown pattern type 'bogus'" in result.output
    assert not (tmp_path / "out.rs").exists()


def test_schema_argument_required(runner, tmp_path):
    result = runner.invoke(schema_to_parser, ["-o", str(tmp_path / "out.rs")])
    assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
