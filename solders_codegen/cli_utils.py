"""
CLI utilities for command line reconstruction and introspection.
"""

from collections.abc import Iterable
from pathlib import Path

import click

PROGRAM_NAME = "solders_codegen"


def reconstruct_command_line(click_command: click.Command, exclude: Iterable[str] = ()) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Flags are rendered by their primary option name; options left at their
    default value are skipped and file paths are shortened to their name, so the comment
    written into generated files does not depend on the working directory.

    Args:
        click_command: Click command object for introspection
        exclude: Parameter names to leave out

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args or param_name in exclude:
            continue

        value = cli_args[param_name]
        if not value:
            continue

        if isinstance(param, click.Argument):
            # Positional arguments are file paths
            arguments.append(Path(str(value)).name)
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param_name}"
            if param.is_flag or param.count:
                options.append(flag)
            else:
                options.extend([flag, _format_value(value)])

    return " ".join([PROGRAM_NAME, *arguments, *options])


def _format_value(value: object) -> str:
    """Shorten existing file paths to their name."""
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.exists() else str(value)
    return str(value)
