"""
rustfmt formatter for generated Rust code.
"""

from __future__ import annotations

import logging
import subprocess

from ..config import FormatterConfig
from .base import ExternalFormatter

logger = logging.getLogger(__name__)


class RustfmtFormatter(ExternalFormatter):
    """Pipes Rust code through `rustfmt --emit stdout`."""

    EXECUTABLE = "rustfmt"

    def command(self, config: FormatterConfig) -> list[str]:
        cmd = [self.executable, "--emit", "stdout", "--edition", config.edition]
        if config.max_width:
            cmd.extend(["--config", f"max_width={config.max_width}"])
        return cmd

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format Rust code using rustfmt.

        Args:
            code: Rust source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the original code when rustfmt is missing or fails
        """
        if not self.is_available():
            logger.warning("%s not found, leaving generated code unformatted", self.executable)
            return code

        try:
            result = subprocess.run(
                self.command(config),
                input=code,
                capture_output=True,
                text=True,
                timeout=60,
            )
        except subprocess.SubprocessError as e:
            logger.warning("rustfmt failed: %s", e)
            return code

        if result.returncode != 0:
            logger.warning("rustfmt rejected the generated code: %s", result.stderr.strip())
            return code
        return result.stdout


def format_with_rustfmt(code: str, edition: str = "2024", max_width: int = 100) -> str:
    """Format Rust code with rustfmt using an ad hoc configuration."""
    config = FormatterConfig(enabled=True, edition=edition, max_width=max_width)
    return RustfmtFormatter().format(code, config)
