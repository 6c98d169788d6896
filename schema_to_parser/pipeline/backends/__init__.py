"""
Code generation backends for different target languages.
"""

from __future__ import annotations

from .base import ParserBackend
from .rust_backend import RustParserBackend

__all__ = ["ParserBackend", "RustParserBackend"]
