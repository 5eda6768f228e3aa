"""Command line interface for repo-manager."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__, prompts
from .errors import RepoManagerError
from .github.client import DEFAULT_BASE_URL
from .models import ACTIONS, SORT_KEYS, RunConfiguration
from .orchestrator import DEFAULT_OUTPUT_FILE, run

_ACTION_LABELS = {
    "fetch": "Fetch and export repositories",
    "analyze": "Analyze repositories for missing/broken metadata",
    "edit": "Edit a single repository",
    "batch-edit": "Batch edit repositories",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _ask_username() -> str:
    return click.prompt("GitHub username").strip()


def _action_options(has_token: bool) -> list[tuple[str, str]]:
    options = []
    for action in ACTIONS:
        label = _ACTION_LABELS[action]
        if action in ("edit", "batch-edit") and not has_token:
            label += " (requires a token)"
        options.append((action, label))
    return options


def build_configuration(
    token: str | None,
    user: str | None,
    sort: str,
    action: str | None,
    output_file: str | None,
    report_file: str | None,
    api_url: str,
) -> RunConfiguration:
    """Resolve every run setting up front, prompting for whatever is unset."""
    if not token:
        token = prompts.ask_text(
            "GitHub personal access token (optional for public repos)", hide_input=True
        ) or None
    if not token and not user:
        user = _ask_username()
    if action is None:
        action = prompts.ask_select("What would you like to do?", _action_options(bool(token)))
    if action == "fetch" and not output_file:
        output_file = prompts.ask_text(
            "Output filename (.txt, .json or .csv)", default=DEFAULT_OUTPUT_FILE
        ) or DEFAULT_OUTPUT_FILE
    return RunConfiguration(
        token=token,
        username=user,
        sort=sort,
        action=action,
        output_file=output_file,
        report_file=report_file,
        base_url=api_url,
    )


@click.command()
@click.option("--user", "-U", default=None, help="GitHub username (used without a valid token).")
@click.option(
    "--token", "-t",
    envvar="GITHUB_ACCESS_TOKEN",
    default=None,
    help="GitHub personal access token. Falls back to GITHUB_ACCESS_TOKEN.",
)
@click.option("--file", "-f", "output_file", default=None, help="Export file (.txt, .json or .csv).")
@click.option(
    "--sort", "-s",
    type=click.Choice(SORT_KEYS),
    default="updated",
    show_default=True,
    help="Order repositories by this key.",
)
@click.option("--action", "-a", type=click.Choice(ACTIONS), default=None, help="Action to run.")
@click.option("--report", "-r", "report_file", default=None, help="Analysis report file.")
@click.option(
    "--api-url",
    envvar="GITHUB_API_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="GitHub REST API base URL.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="repo-manager")
def main(
    user: str | None,
    token: str | None,
    output_file: str | None,
    sort: str,
    action: str | None,
    report_file: str | None,
    api_url: str,
    verbose: bool,
) -> None:
    """Fetch, export, analyze and batch-edit a GitHub user's repositories."""
    _configure_logging(verbose)
    console = Console(stderr=True)
    try:
        config = build_configuration(
            token, user, sort, action, output_file, report_file, api_url
        )
        asyncio.run(run(config, ask_username=_ask_username))
    except RepoManagerError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)
    Console().print("Done!")


if __name__ == "__main__":
    main()
