"""
Parser generator orchestrating the pipeline phases.

1. Classify every definition of the schema
2. Dispatch parser emission to the backend (struct or element group)
3. Assemble the prologue and the parsers in definition order
4. Optionally format and write the result
"""

from __future__ import annotations

import logging
from pathlib import Path

from .. import __version__
from ..cli_utils import reconstruct_command_line
from .backends import RustParserBackend
from .config import CodegenConfig, OutputMode
from .formatters import RustfmtFormatter
from .schema_ast.nodes import Definition, Schema
from .writer import AtomicWriter, validate_rust

logger = logging.getLogger(__name__)


class ParserGenerator:
    """Generates event-based parsers for every complex definition of a schema."""

    def __init__(self, schema: Schema, config: CodegenConfig | None = None):
        """
        Initialize the generator.

        Args:
            schema: The schema to generate parsers for
            config: Code generation configuration
        """
        self.schema = schema
        self.config = config or CodegenConfig()
        self.backend = RustParserBackend(schema, self.config)
        self.classifier = self.backend.classifier

    def generate(self) -> str:
        """
        Generate the parser source text.

        Returns:
            The prologue followed by one parser per qualifying definition
        """
        output = [self.backend.gen_prologue(self._generation_comment())]

        emitted = 0
        for definition in self.schema.definitions:
            code = self.gen_definition(definition)
            if code is None:
                continue
            output.append(f"\n{code}\n")
            emitted += 1

        logger.info(
            "Generated %d parsers from %d definitions (module '%s')",
            emitted,
            len(self.schema.definitions),
            self.config.module_name,
        )
        return "".join(output)

    def gen_definition(self, definition: Definition) -> str | None:
        """
        Generate the parser of one definition.

        Simple types and type aliases are consumed inline by their
        containers and get no standalone parser.

        Args:
            definition: The definition

        Returns:
            Parser source text, or None when the definition is skipped
        """
        if not self.classifier.has_parser(definition.name, definition.pattern):
            logger.debug("Skipping %s: simple type or alias", definition.name)
            return None

        conventions = self.config.conventions
        if conventions.is_element_group(definition.name) and self.classifier.is_element_choice(definition.pattern):
            logger.debug("Generating element group parser for %s", definition.name)
            return self.backend.gen_element_group_parser(definition)

        logger.debug("Generating struct parser for %s", definition.name)
        return self.backend.gen_struct_parser(definition)

    def write(self, path: str | Path) -> str:
        """
        Generate, optionally format, and write the parsers to a file.

        Args:
            path: Output file path

        Returns:
            The written code

        Raises:
            FileExistsError: If the file exists and the output mode forbids overwriting
            GeneratedCodeError: If the generated code fails validation
        """
        path = Path(path)
        code = self.generate()

        if self.config.formatter.enabled:
            code = RustfmtFormatter().format(code, self.config.formatter)

        output = self.config.output
        overwrite = output.mode == OutputMode.FORCE

        if output.atomic_write:
            writer = AtomicWriter()
            if overwrite:
                writer.write(path, code, validate=output.validate_before_write)
            else:
                writer.write_if_not_exists(path, code, validate=output.validate_before_write)
        else:
            if not overwrite and path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")
            if output.validate_before_write:
                validate_rust(code)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(code, encoding="utf-8")

        logger.info("Wrote %s", path)
        return code

    def _generation_comment(self) -> str:
        """Generate a simplified command line comment for the generated file."""
        if not self.config.add_generation_comment:
            return ""

        try:
            from ..schema_to_parser import schema_to_parser as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "schema_to_parser"

        return f"{self.backend.COMMENT_PREFIX} Generated by schema_to_parser v{__version__} : {command_line}"


def generate_parsers(schema: Schema, config: CodegenConfig | None = None) -> str:
    """Generate parser code for all complex types in the schema."""
    return ParserGenerator(schema, config).generate()
