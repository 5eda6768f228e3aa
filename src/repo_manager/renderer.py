"""Text/JSON/CSV repository exports and rich terminal summaries."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import OutputError
from .models import (
    GITHUB_WEB_URL,
    AnalysisResult,
    BatchUpdateOutcome,
    Repository,
    RepositoryUpdatePatch,
    summarize_outcomes,
)

OUTPUT_FORMATS = ("txt", "json", "csv")

_CSV_HEADERS = [
    "Name",
    "Description",
    "Stars",
    "Forks",
    "Language",
    "Private",
    "Homepage",
    "Repository URL",
    "Created At",
    "Updated At",
    "Last Push",
]


def _profile_url(username: str) -> str:
    return f"{GITHUB_WEB_URL}/{username}"


def _counts(repos: list[Repository]) -> tuple[int, int, int]:
    private = sum(1 for r in repos if r.private)
    return len(repos), len(repos) - private, private


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file (replacing it) and print confirmation."""
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as exc:
        raise OutputError(f"Cannot write {output_file}: {exc.strerror or exc}") from exc
    Console().print(f"Saved to {output_file}")


def get_output_format(filename: str) -> str:
    """Pick an encoding from the file extension: json, csv, else txt."""
    _, dot, extension = filename.rpartition(".")
    extension = extension.lower() if dot else ""
    if extension in ("json", "csv"):
        return extension
    return "txt"


def format_as_text(repos: list[Repository], username: str) -> str:
    total, public, private = _counts(repos)
    lines = [
        f"GitHub Profile: {_profile_url(username)}",
        f"Username: {username}",
        f"Total Repositories: {total}",
        f"Public Repositories: {public}",
        f"Private Repositories: {private}",
        "",
        "Repositories:",
        "",
    ]
    for r in repos:
        lines.append(f"- {r.name} ({r.stars} stars, {r.forks} forks)")
        lines.append(f"  Description: {r.description or 'No description provided'}")
        lines.append(f"  Language: {r.language or 'Not specified'}")
        lines.append(f"  Private: {'Yes' if r.private else 'No'}")
        if r.homepage:
            lines.append(f"  Homepage: {r.homepage}")
        lines.append(f"  Repository URL: {r.html_url}")
        lines.append(f"  Created At: {r.created_at}")
        lines.append(f"  Updated At: {r.updated_at}")
        lines.append(f"  Last Push: {r.pushed_at}")
        lines.append("")
    return "\n".join(lines) + "\n"


def format_as_json(repos: list[Repository], username: str) -> str:
    total, public, private = _counts(repos)
    data = {
        "profile": _profile_url(username),
        "username": username,
        "total_repositories": total,
        "public_repositories": public,
        "private_repositories": private,
        "repositories": [
            {
                "name": r.name,
                "description": r.description,
                "stars": r.stars,
                "forks": r.forks,
                "language": r.language,
                "private": r.private,
                "homepage": r.homepage,
                "repository_url": r.html_url,
                "created_at": r.created_at,
                "updated_at": r.updated_at,
                "pushed_at": r.pushed_at,
            }
            for r in repos
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_as_csv(repos: list[Repository], username: str) -> str:
    total, public, private = _counts(repos)
    output = io.StringIO()
    output.write(f"# GitHub Profile: {_profile_url(username)}\n")
    output.write(f"# Total Repositories: {total}\n")
    output.write(f"# Public: {public}, Private: {private}\n\n")

    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(_CSV_HEADERS)
    for r in repos:
        writer.writerow([
            r.name,
            r.description or "",
            r.stars,
            r.forks,
            r.language or "",
            "true" if r.private else "false",
            r.homepage or "",
            r.html_url,
            r.created_at or "",
            r.updated_at or "",
            r.pushed_at or "",
        ])
    return output.getvalue()


_FORMATTERS = {
    "txt": format_as_text,
    "json": format_as_json,
    "csv": format_as_csv,
}


def format_repositories(repos: list[Repository], username: str, output_format: str) -> str:
    return _FORMATTERS.get(output_format, format_as_text)(repos, username)


def format_analysis_report(
    repos: list[Repository],
    analysis: AnalysisResult,
    username: str,
    generated_at: datetime | None = None,
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        "Repository Analysis Report",
        "=" * 42,
        "",
        f"GitHub Profile: {_profile_url(username)}",
        f"Total Repositories: {len(repos)}",
        f"Analysis Date: {generated_at.isoformat()}",
        "",
        "SUMMARY:",
        f"- {len(analysis.missing_description)} repositories missing descriptions",
        f"- {len(analysis.missing_homepage)} repositories missing homepages",
        f"- {len(analysis.broken_homepage)} repositories with potentially broken homepages",
        "",
    ]

    if analysis.missing_description:
        lines += ["REPOSITORIES MISSING DESCRIPTIONS:", "-" * 40]
        for r in analysis.missing_description:
            lines += [
                f"- {r.name}",
                f"  URL: {r.html_url}",
                f"  Language: {r.language or 'Not specified'}",
                f"  Stars: {r.stars}, Forks: {r.forks}",
                "",
            ]

    if analysis.missing_homepage:
        lines += ["REPOSITORIES MISSING HOMEPAGES:", "-" * 40]
        for r in analysis.missing_homepage:
            lines += [
                f"- {r.name}",
                f"  URL: {r.html_url}",
                f"  Description: {r.description or 'No description'}",
                f"  Language: {r.language or 'Not specified'}",
                "",
            ]

    if analysis.broken_homepage:
        lines += ["REPOSITORIES WITH POTENTIALLY BROKEN HOMEPAGES:", "-" * 50]
        for r in analysis.broken_homepage:
            lines += [
                f"- {r.name}",
                f"  URL: {r.html_url}",
                f"  Current Homepage: {r.homepage}",
                f"  Description: {r.description or 'No description'}",
                "",
            ]

    return "\n".join(lines) + "\n"


def write_repositories_to_file(repos: list[Repository], username: str, filename: str) -> str:
    """Export ``repos`` to ``filename`` in the format its extension implies."""
    output_format = get_output_format(filename)
    _write_to_file(format_repositories(repos, username, output_format), filename)
    return output_format


def write_analysis_to_file(
    repos: list[Repository], analysis: AnalysisResult, username: str, filename: str
) -> None:
    _write_to_file(format_analysis_report(repos, analysis, username), filename)


def render_summary(
    repos: list[Repository], username: str, console: Console | None = None
) -> None:
    """Print a fetch summary table to the terminal."""
    console = console or Console()
    total, public, private = _counts(repos)
    console.print(Panel(
        Text(f"{_profile_url(username)}\n{total} repositories: "
             f"{public} public, {private} private", justify="center"),
        style="bold cyan",
    ))
    if not repos:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Repository")
    table.add_column("Stars", justify="right")
    table.add_column("Forks", justify="right")
    table.add_column("Language")
    table.add_column("Visibility")
    for r in repos:
        table.add_row(
            r.name,
            f"{r.stars:,}",
            f"{r.forks:,}",
            r.language or "-",
            "private" if r.private else "public",
        )
    console.print(table)


def render_analysis_summary(analysis: AnalysisResult, console: Console | None = None) -> None:
    console = console or Console()
    console.print("[bold]Analysis results[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Missing descriptions", str(len(analysis.missing_description)))
    summary.add_row("Missing homepages", str(len(analysis.missing_homepage)))
    summary.add_row("Potentially broken homepages", str(len(analysis.broken_homepage)))
    console.print(summary)


def _on_off(value: bool) -> str:
    return "Enabled" if value else "Disabled"


def render_patch_preview(
    repo: Repository, patch: RepositoryUpdatePatch, console: Console | None = None
) -> None:
    """Print the before/after of each field a patch would change."""
    console = console or Console()
    table = Table(title=f"Changes to {repo.full_name}", header_style="bold")
    table.add_column("Field")
    table.add_column("Current")
    table.add_column("New")
    if patch.description is not None:
        table.add_row("Description", repo.description or "None", patch.description)
    if patch.homepage is not None:
        table.add_row("Homepage", repo.homepage or "None", patch.homepage or "(cleared)")
    if patch.private is not None:
        table.add_row(
            "Visibility",
            "Private" if repo.private else "Public",
            "Private" if patch.private else "Public",
        )
    for label, attr in (("Issues", "has_issues"), ("Wiki", "has_wiki"), ("Projects", "has_projects")):
        new = getattr(patch, attr)
        if new is not None:
            current = getattr(repo, attr)
            table.add_row(label, "-" if current is None else _on_off(current), _on_off(new))
    console.print(table)


def render_batch_outcomes(
    outcomes: list[BatchUpdateOutcome], console: Console | None = None
) -> None:
    console = console or Console()
    for o in outcomes:
        if o.success:
            console.print(f"[green]✔[/green] {o.full_name}")
        else:
            console.print(f"[red]✘[/red] {o.full_name}: {o.error}")
    succeeded, failed = summarize_outcomes(outcomes)
    console.print(
        f"[bold]Batch update completed:[/bold] {succeeded} successful, {failed} failed"
    )
