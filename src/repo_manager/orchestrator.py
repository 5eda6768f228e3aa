"""Orchestrator: authenticate, fetch, sort, then run the selected action."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console

from . import prompts
from .errors import ValidationError
from .fetcher import fetch_repositories, resolve_authentication
from .github.client import GitHubClient
from .models import RunConfiguration
from .renderer import render_summary, write_repositories_to_file
from .sorter import sort_repositories
from .workflows import (
    analyze_and_fix,
    batch_edit_repositories,
    edit_single_repository,
    repo_options,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "repositories.txt"
_EDIT_ACTIONS = ("edit", "batch-edit")


async def run(
    config: RunConfiguration,
    console: Console | None = None,
    ask_username: Callable[[], str] | None = None,
) -> None:
    """Execute one run of the tool for a fully resolved configuration.

    ``ask_username`` supplies a username when a rejected token leaves the
    run anonymous without one.
    """
    console = console or Console()
    async with GitHubClient(token=config.token, base_url=config.base_url) as client:
        auth = await resolve_authentication(
            client, config.username, ask_username=ask_username
        )
        if config.action in _EDIT_ACTIONS and not auth.is_authenticated:
            raise ValidationError(f"The '{config.action}' action requires authentication")

        repos = await fetch_repositories(client, auth, sort=config.sort)
        repos = sort_repositories(repos, config.sort)
        render_summary(repos, auth.username, console)
        logger.debug("Running action %s for %s", config.action, auth.username)

        if config.action == "fetch":
            write_repositories_to_file(
                repos, auth.username, config.output_file or DEFAULT_OUTPUT_FILE
            )
        elif config.action == "analyze":
            await analyze_and_fix(
                client,
                repos,
                auth.username,
                report_file=config.report_file,
                can_edit=auth.is_authenticated,
                console=console,
            )
        elif config.action == "edit":
            if not repos:
                raise ValidationError("No repositories to edit")
            name = prompts.ask_select(
                "Select repository to edit",
                repo_options(repos),
            )
            repo = next(r for r in repos if r.name == name)
            await edit_single_repository(client, repo, console)
        elif config.action == "batch-edit":
            await batch_edit_repositories(client, repos, console)
        else:
            raise ValidationError(f"Unknown action: {config.action}")
