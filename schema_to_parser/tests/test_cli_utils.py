#!/usr/bin/env python3

import click
import pytest
from click.testing import CliRunner

from schema_to_parser.cli_utils import reconstruct_command_line
from schema_to_parser.schema_to_parser import schema_to_parser


@click.command()
@click.option("--name", "-n", default=None)
@click.option("--width", default=100, type=int)
@click.option("--quiet", is_flag=True, default=False)
@click.option("--verbose", "-v", count=True)
@click.option("--include", "-I", multiple=True)
@click.argument("paths", nargs=-1)
def sample(name, width, quiet, verbose, include, paths):
    click.echo(reconstruct_command_line(sample))


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        assert reconstruct_command_line(schema_to_parser) == "schema_to_parser"

    def test_defaults_are_omitted(self):
        result = CliRunner().invoke(sample, ["a.json"])
        assert result.output.strip() == "schema_to_parser a.json"

    def test_arguments_before_options(self):
        result = CliRunner().invoke(sample, ["--width", "80", "-n", "wml", "a.json", "b.json"])
        assert result.output.strip() == "schema_to_parser a.json b.json --name wml --width 80"

    def test_flags_counts_and_multiple_values(self):
        result = CliRunner().invoke(sample, ["-vv", "--quiet", "-I", "x", "-I", "y", "a.json"])
        assert result.output.strip() == "schema_to_parser a.json --quiet --verbose --verbose --include x --include y"

    def test_existing_paths_shortened(self, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text("{}")

        result = CliRunner().invoke(sample, [str(schema)])

        assert result.output.strip() == "schema_to_parser schema.json"


if __name__ == "__main__":
    pytest.main([__file__])
