"""Interactive prompts built on click."""

from __future__ import annotations

import click
from rich.console import Console

_console = Console()


def ask_text(message: str, default: str = "", hide_input: bool = False) -> str:
    value = click.prompt(
        message, default=default, show_default=bool(default), hide_input=hide_input
    )
    return value.strip()


def ask_confirm(message: str, default: bool = False) -> bool:
    return click.confirm(message, default=default)


def ask_select(message: str, options: list[tuple[str, str]]) -> str:
    """Show a numbered menu of ``(value, label)`` pairs and return a value."""
    _console.print(f"[bold]{message}[/bold]")
    for i, (_, label) in enumerate(options, 1):
        _console.print(f"  {i}. {label}")
    choice = click.prompt("Choice", type=click.IntRange(1, len(options)))
    return options[choice - 1][0]


def _parse_indices(raw: str, upper: int) -> list[int]:
    indices: list[int] = []
    for part in raw.replace(" ", "").split(","):
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= upper:
            raise click.BadParameter(f"{part!r} is not a number between 1 and {upper}")
        if int(part) - 1 not in indices:
            indices.append(int(part) - 1)
    return indices


def ask_multiselect(message: str, options: list[tuple[str, str]]) -> list[str]:
    """Like :func:`ask_select` but accepts a comma-separated list (may be empty)."""
    _console.print(f"[bold]{message}[/bold]")
    for i, (_, label) in enumerate(options, 1):
        _console.print(f"  {i}. {label}")
    while True:
        raw = click.prompt(
            "Choices (comma-separated, empty for none)", default="", show_default=False
        )
        try:
            indices = _parse_indices(raw, len(options))
        except click.BadParameter as exc:
            _console.print(f"[red]{exc.message}[/red]")
            continue
        return [options[i][0] for i in indices]
