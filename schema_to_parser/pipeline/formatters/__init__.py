"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import ExternalFormatter, Formatter
from .rustfmt_formatter import RustfmtFormatter, format_with_rustfmt

__all__ = [
    "ExternalFormatter",
    "Formatter",
    "RustfmtFormatter",
    "format_with_rustfmt",
]
