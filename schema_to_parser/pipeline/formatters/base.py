"""
Base classes for post-processing formatters of generated code.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Rewrites generated source text; must return the input unchanged when it cannot run."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The generated source text
            config: Formatter configuration

        Returns:
            Formatted code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the formatter can run in this environment."""


class ExternalFormatter(Formatter):
    """Formatter backed by a command line tool, probed once with `--version`."""

    # Default executable name, looked up on PATH
    EXECUTABLE: str = ""

    def __init__(self, executable: str | None = None):
        self.executable = executable or self.EXECUTABLE
        self._available: bool | None = None

    def is_available(self) -> bool:
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available
