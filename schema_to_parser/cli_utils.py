"""
CLI utilities for command line reconstruction and introspection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

PROGRAM_NAME = "schema_to_parser"


def _format_value(value: Any) -> str:
    """Format a parameter value, shortening existing paths to their file name."""
    path = Path(str(value))
    if isinstance(value, (str, Path)) and path.exists():
        return path.name
    return str(value)


def _format_param(param: click.Parameter, value: Any) -> list[str]:
    """Render one parameter as command line words (empty when it is unset or default)."""
    if value is None or value == () or value is False:
        return []

    values = value if isinstance(value, (tuple, list)) else (value,)

    if isinstance(param, click.Argument):
        return [_format_value(v) for v in values]

    if param.default is not None and value == param.default:
        return []

    flag = param.opts[0] if param.opts else f"--{param.name}"
    if isinstance(param, click.Option) and param.is_flag:
        return [flag]
    if isinstance(param, click.Option) and param.count:
        return [flag] * int(value)

    words = []
    for v in values:
        words.extend([flag, _format_value(v)])
    return words


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Positional arguments come first, then the options that differ from
    their defaults.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        # No active context (library use)
        return PROGRAM_NAME

    cli_args = ctx.params
    arguments: list[str] = []
    options: list[str] = []

    for param in click_command.params:
        if param.name not in cli_args:
            continue
        words = _format_param(param, cli_args[param.name])
        if isinstance(param, click.Argument):
            arguments.extend(words)
        else:
            options.extend(words)

    return " ".join([PROGRAM_NAME, *arguments, *options])
