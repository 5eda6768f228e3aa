"""Interactive edit and analysis workflows."""

from __future__ import annotations

import logging

from rich.console import Console

from . import prompts
from .analyzer import analyze_repositories, is_blank, is_broken_homepage
from .github.client import GitHubClient
from .models import (
    BatchUpdateOutcome,
    BatchUpdateRequest,
    Repository,
    RepositoryUpdatePatch,
)
from .renderer import (
    render_analysis_summary,
    render_batch_outcomes,
    render_patch_preview,
    write_analysis_to_file,
)
from .updater import (
    plan_custom_updates,
    plan_description_template,
    plan_homepage_fixes,
    plan_privacy_change,
    update_batch,
    update_repository,
)

logger = logging.getLogger(__name__)

DEFAULT_REPORT_FILE = "repository-analysis.txt"

BATCH_KINDS = [
    ("add-description", "Add descriptions to repositories missing them"),
    ("fix-homepage", "Fix homepage URLs"),
    ("update-privacy", "Update privacy settings"),
    ("custom", "Apply custom updates to selected repositories"),
]

_FEATURES = [("has_issues", "Issues"), ("has_wiki", "Wiki"), ("has_projects", "Projects")]


def repo_options(repos: list[Repository]) -> list[tuple[str, str]]:
    return [(r.name, f"{r.name} ({r.description or 'No description'})") for r in repos]


async def edit_single_repository(
    client: GitHubClient, repo: Repository, console: Console | None = None
) -> Repository | None:
    """Prompt for new metadata for ``repo`` and apply it after confirmation.

    Returns the updated repository, or None when nothing was changed.
    """
    console = console or Console()
    console.print(f"\n[bold]Editing repository:[/bold] {repo.full_name}")
    console.print(f"Current description: {repo.description or 'No description'}")
    console.print(f"Current homepage: {repo.homepage or 'No homepage'}")

    changes: dict[str, object] = {}

    description = prompts.ask_text("New description (empty keeps current)")
    if description and description != repo.description:
        changes["description"] = description

    homepage = prompts.ask_text("New homepage URL (empty keeps current)")
    if homepage and homepage != repo.homepage:
        changes["homepage"] = homepage

    visibility = "private" if repo.private else "public"
    if prompts.ask_confirm(f"Repository is currently {visibility}. Change visibility?"):
        changes["private"] = not repo.private

    if prompts.ask_confirm("Edit repository features (issues, wiki, projects)?"):
        # The listing does not always carry feature flags.
        current = Repository.from_api(await client.get_repository(repo.owner, repo.name))
        options = [
            (attr, f"{label} (currently {'enabled' if getattr(current, attr) else 'disabled'})")
            for attr, label in _FEATURES
        ]
        enabled = prompts.ask_multiselect("Select features to enable", options)
        for attr, _ in _FEATURES:
            changes[attr] = attr in enabled
        repo = current

    patch = RepositoryUpdatePatch(**changes)
    if patch.is_empty():
        console.print("No changes to apply.")
        return None

    render_patch_preview(repo, patch, console)
    if not prompts.ask_confirm("Apply these changes?", default=True):
        console.print("Changes cancelled.")
        return None

    updated = await update_repository(client, repo.owner, repo.name, patch)
    console.print(f"[green]Updated {updated.full_name}[/green]")
    return updated


def _plan_add_descriptions(repos: list[Repository], console: Console) -> list[BatchUpdateRequest]:
    missing = [r for r in repos if is_blank(r.description)]
    if not missing:
        console.print("All repositories already have descriptions.")
        return []
    console.print(f"Found {len(missing)} repositories without descriptions")

    if prompts.ask_confirm("Use a template description? (otherwise prompt per repository)", default=True):
        template = prompts.ask_text("Description template ({name} is the repository name)")
        if not template:
            console.print("A template is required for a batch operation.")
            return []
        return plan_description_template(missing, template)

    requests = []
    for r in missing:
        description = prompts.ask_text(f"Description for {r.name} (empty skips)")
        if description:
            requests.append(
                BatchUpdateRequest(r.owner, r.name, RepositoryUpdatePatch(description=description))
            )
    return requests


def _plan_fix_homepages(repos: list[Repository], console: Console) -> list[BatchUpdateRequest]:
    broken = [r for r in repos if is_broken_homepage(r.homepage)]
    if not broken:
        console.print("No homepage issues found.")
        return []
    console.print(f"Found {len(broken)} repositories with homepage issues")

    homepages = {}
    for r in broken:
        console.print(f"\n{r.name}: current homepage {r.homepage}")
        homepages[r.name] = prompts.ask_text("Corrected homepage URL (empty removes it)")
    return plan_homepage_fixes(broken, homepages)


def _plan_privacy(repos: list[Repository], console: Console) -> list[BatchUpdateRequest]:
    public = [r for r in repos if not r.private]
    private = [r for r in repos if r.private]
    console.print(f"Current status: {len(public)} public, {len(private)} private")

    options = []
    if public:
        options.append(("make-private", f"Make public repositories private ({len(public)} available)"))
    if private:
        options.append(("make-public", f"Make private repositories public ({len(private)} available)"))
    if not options:
        console.print("No repositories available for this operation.")
        return []

    make_private = prompts.ask_select("Which visibility change?", options) == "make-private"
    targets = public if make_private else private
    names = prompts.ask_multiselect(
        f"Select repositories to make {'private' if make_private else 'public'}",
        repo_options(targets),
    )
    return plan_privacy_change(targets, names, make_private)


def _plan_custom(repos: list[Repository], console: Console) -> list[BatchUpdateRequest]:
    names = prompts.ask_multiselect("Select repositories to update", repo_options(repos))
    if not names:
        console.print("No repositories selected.")
        return []

    description = homepage = None
    if prompts.ask_confirm("Update descriptions?"):
        description = prompts.ask_text("New description ({name} is the repository name)") or None
    if prompts.ask_confirm("Update homepage URLs?"):
        homepage = prompts.ask_text("Homepage URL ({name} is the repository name)") or None

    patch = RepositoryUpdatePatch(description=description, homepage=homepage)
    if patch.is_empty():
        console.print("No updates configured.")
        return []
    return plan_custom_updates(repos, names, patch)


_PLANNERS = {
    "add-description": _plan_add_descriptions,
    "fix-homepage": _plan_fix_homepages,
    "update-privacy": _plan_privacy,
    "custom": _plan_custom,
}


async def batch_edit_repositories(
    client: GitHubClient, repos: list[Repository], console: Console | None = None
) -> list[BatchUpdateOutcome]:
    console = console or Console()
    console.print(f"\n[bold]Batch editing {len(repos)} repositories[/bold]")
    kind = prompts.ask_select("What type of batch edit?", BATCH_KINDS)
    requests = _PLANNERS[kind](repos, console)
    if not requests:
        return []

    logger.info("Starting batch update of %d repositories", len(requests))
    outcomes = await update_batch(client, requests)
    render_batch_outcomes(outcomes, console)
    return outcomes


async def analyze_and_fix(
    client: GitHubClient,
    repos: list[Repository],
    username: str,
    report_file: str | None = None,
    can_edit: bool = False,
    console: Console | None = None,
) -> list[BatchUpdateOutcome]:
    """Report metadata defects and optionally batch-edit affected repositories.

    Edits act on the listing fetched at the start of the run; re-fetch to see
    the server's post-edit state.
    """
    console = console or Console()
    analysis = analyze_repositories(repos)
    render_analysis_summary(analysis, console)

    if report_file is None and prompts.ask_confirm(
        "Save detailed analysis report to file?", default=True
    ):
        report_file = prompts.ask_text("Report filename", default=DEFAULT_REPORT_FILE)
    if report_file:
        write_analysis_to_file(repos, analysis, username, report_file)

    if not analysis.total_issues or not can_edit:
        return []
    if not prompts.ask_confirm(
        f"Found {analysis.total_issues} issues needing attention. Start batch editing?",
        default=True,
    ):
        return []
    return await batch_edit_repositories(client, analysis.affected(), console)
