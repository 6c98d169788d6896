"""
Validated, atomic writes of generated parser files.

A generation run either replaces the output file with complete, checked
code or leaves the previous file untouched.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

# Declarations every generated parser file must contain
REQUIRED_DECLARATIONS = {
    "pub trait FromXml": "the FromXml trait",
    "pub enum ParseError": "the ParseError type",
}


class GeneratedCodeError(Exception):
    """Raised when generated code fails validation before it is written.

    This can happen when:
    - The FromXml trait or ParseError type is missing from the output
    - Braces are unbalanced (a template rendered an incomplete block)
    """

    pass


def validate_rust(content: str) -> None:
    """
    Structural checks of generated Rust parser code (no full parsing).

    Args:
        content: Rust code to validate

    Raises:
        GeneratedCodeError: If validation fails
    """
    for declaration, description in REQUIRED_DECLARATIONS.items():
        if declaration not in content:
            raise GeneratedCodeError(f"Generated Rust code is missing {description}")

    # Line comments (the generation comment quotes file names) are not code.
    # Tag literals are byte strings of XML names and never contain braces.
    code = "\n".join(line for line in content.splitlines() if not line.lstrip().startswith("//"))
    open_braces = code.count("{")
    close_braces = code.count("}")
    if open_braces != close_braces:
        raise GeneratedCodeError(f"Generated Rust code has unbalanced braces: {open_braces} open, {close_braces} close")


class AtomicWriter:
    """Writes a file through a sibling temporary file.

    The content goes to `.<name>.<random>.tmp` next to the target, is
    validated, then renamed over the target. A failed validation or an
    interrupted write removes the temporary file and keeps the old target.
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """
        Args:
            validate: Check raising on bad content (defaults to `validate_rust`)
        """
        self._validate = validate or validate_rust

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """
        Replace `path` with `content`.

        Args:
            path: Target file path (parent directories are created)
            content: Content to write
            validate: Whether to run the validation check before the rename

        Raises:
            GeneratedCodeError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # The rename is only atomic within one filesystem
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_name)

        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(content)
            if validate:
                self._validate(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> None:
        """
        Like `write`, but never replaces an existing file.

        Raises:
            FileExistsError: If the file already exists
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        self.write(path, content, validate)
