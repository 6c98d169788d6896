"""
Analyzer module.

Contains name resolution, type classification, field extraction and the
mapping coverage report.
"""

from __future__ import annotations

from .classifier import ParseStrategy, TypeClassifier, TypeInfo, xsd_to_rust
from .field_extractor import Field, FieldExtractor
from .name_resolver import NameResolver
from .report import ModuleReport, analyze_schema

__all__ = [
    "Field",
    "FieldExtractor",
    "ModuleReport",
    "NameResolver",
    "ParseStrategy",
    "TypeClassifier",
    "TypeInfo",
    "analyze_schema",
    "xsd_to_rust",
]
