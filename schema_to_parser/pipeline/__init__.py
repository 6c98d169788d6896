"""
Pipeline - schema to event-based parser generator.

This module provides a multi-phase architecture for generating
streaming XML parsers from RELAX NG content models:

1. Phase 1 (Parser): Read the schema document into the Pattern AST
2. Phase 2 (Analyzer): Resolve names, classify shapes and extract fields
3. Phase 3 (Backend): Render one parser per complex definition from templates
4. Phase 4 (Formatter): Optional post-processing (rustfmt)
5. Phase 5 (Writer): Validated, atomic write of the output file
"""

from __future__ import annotations

from .analyzer import ModuleReport, analyze_schema
from .config import (
    CodegenConfig,
    ConfigError,
    FeatureMappings,
    FormatterConfig,
    ModuleMappings,
    NameMappings,
    NamingStrategy,
    OutputConfig,
    OutputMode,
    SchemaConventions,
)
from .generator import ParserGenerator, generate_parsers
from .schema_ast import Schema, SchemaError, SchemaParser, load_schema
from .writer import AtomicWriter, GeneratedCodeError

__all__ = [
    "ParserGenerator",
    "generate_parsers",
    "ModuleReport",
    "analyze_schema",
    "CodegenConfig",
    "ConfigError",
    "FeatureMappings",
    "FormatterConfig",
    "ModuleMappings",
    "NameMappings",
    "NamingStrategy",
    "OutputConfig",
    "OutputMode",
    "SchemaConventions",
    "Schema",
    "SchemaError",
    "SchemaParser",
    "load_schema",
    "AtomicWriter",
    "GeneratedCodeError",
]
