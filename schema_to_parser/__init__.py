"""Schema to Parser Generator

A Python package for generating event-based XML parsers from RELAX NG
content models. Emits quick-xml `FromXml` implementations for every
complex type and element group of a schema.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .pipeline import (
    AtomicWriter,
    CodegenConfig,
    ConfigError,
    FeatureMappings,
    FormatterConfig,
    GeneratedCodeError,
    ModuleReport,
    NameMappings,
    OutputConfig,
    OutputMode,
    ParserGenerator,
    SchemaError,
    analyze_schema,
    generate_parsers,
    load_schema,
)

__all__ = [
    "ParserGenerator",
    "generate_parsers",
    "load_schema",
    "analyze_schema",
    "ModuleReport",
    "CodegenConfig",
    "ConfigError",
    "FeatureMappings",
    "FormatterConfig",
    "NameMappings",
    "OutputConfig",
    "OutputMode",
    "SchemaError",
    "GeneratedCodeError",
    "AtomicWriter",
]
