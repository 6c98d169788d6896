"""
Base class for parser generation backends.

Defines the interface that all target-language backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.classifier import TypeClassifier
from ..analyzer.field_extractor import FieldExtractor
from ..analyzer.name_resolver import NameResolver
from ..config import CodegenConfig
from ..schema_ast.nodes import Definition, Pattern, Schema


class ParserBackend(ABC):
    """Abstract base class for parser generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Line comment prefix
    COMMENT_PREFIX: str = "//"

    def __init__(self, schema: Schema, config: CodegenConfig):
        """
        Initialize the backend.

        Args:
            schema: The schema the parsers are generated for
            config: Code generation configuration
        """
        self.schema = schema
        self.config = config
        self.names = NameResolver(config)
        self.classifier = TypeClassifier(schema, config, self.names)
        self.extractor = FieldExtractor(config, self.names)
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )

        self.prologue_template = self.jinja_env.get_template(f"prologue.{self.FILE_EXTENSION}.jinja2")
        self.struct_template = self.jinja_env.get_template(f"struct_parser.{self.FILE_EXTENSION}.jinja2")
        self.empty_struct_template = self.jinja_env.get_template(f"empty_struct_parser.{self.FILE_EXTENSION}.jinja2")
        self.element_group_template = self.jinja_env.get_template(f"element_group_parser.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def gen_prologue(self, generation_comment: str = "") -> str:
        """
        Generate the fixed prologue: error taxonomy, helpers and the parsing trait.

        Args:
            generation_comment: Optional comment line placed first

        Returns:
            Prologue source text
        """

    @abstractmethod
    def gen_struct_parser(self, definition: Definition) -> str | None:
        """
        Generate the parser of a struct-shaped definition.

        Args:
            definition: The definition

        Returns:
            Parser source text, or None when nothing is generated
        """

    @abstractmethod
    def gen_element_group_parser(self, definition: Definition) -> str | None:
        """
        Generate the parser of an element group (tag-discriminated union).

        Args:
            definition: The definition

        Returns:
            Parser source text, or None when the pattern has no element variants
        """

    @abstractmethod
    def gen_attr_parse_expr(self, pattern: Pattern) -> str:
        """
        Generate the expression coercing raw attribute text to a field value.

        Args:
            pattern: The attribute content pattern

        Returns:
            Expression source text
        """
