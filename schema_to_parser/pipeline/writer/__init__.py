"""
Output writing for generated code.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, GeneratedCodeError, validate_rust

__all__ = ["AtomicWriter", "GeneratedCodeError", "validate_rust"]
