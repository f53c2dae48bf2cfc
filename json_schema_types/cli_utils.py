"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

COMMAND_NAME = "json_schema_types"


def _format_value(value) -> str:
    """Shorten absolute paths to their file name so generated files carry no local directories."""
    if isinstance(value, (str, Path)) and Path(str(value)).is_absolute():
        return Path(str(value)).name
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line from the current Click context.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string, or the bare command name outside a Click context
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return COMMAND_NAME

    cli_args = ctx.params
    arguments = []
    options = []

    for param in click_command.params:
        value = cli_args.get(param.name)
        if not value:
            continue

        if isinstance(param, click.Argument):
            arguments.append(_format_value(value))
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, _format_value(value)])

    return " ".join([COMMAND_NAME] + arguments + options)
