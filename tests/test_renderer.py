"""Tests for the renderer module."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from repo_manager.analyzer import analyze_repositories
from repo_manager.errors import OutputError
from repo_manager.models import BatchUpdateOutcome, Repository, RepositoryUpdatePatch
from repo_manager.renderer import (
    format_analysis_report,
    format_as_csv,
    format_as_json,
    format_as_text,
    get_output_format,
    render_analysis_summary,
    render_batch_outcomes,
    render_patch_preview,
    render_summary,
    write_analysis_to_file,
    write_repositories_to_file,
)


def _make_repo(name: str, **kwargs) -> Repository:
    defaults = dict(
        id=sum(map(ord, name)),
        name=name,
        owner="octocat",
        full_name=f"octocat/{name}",
        html_url=f"https://github.com/octocat/{name}",
        description=f"The {name} project",
        homepage=None,
        language="Python",
        stars=10,
        forks=2,
        private=False,
        created_at="2023-01-01T00:00:00Z",
        updated_at="2024-01-01T00:00:00Z",
        pushed_at="2024-01-02T00:00:00Z",
    )
    defaults.update(kwargs)
    return Repository(**defaults)


def _make_repos() -> list[Repository]:
    return [
        _make_repo("alpha", homepage="https://alpha.dev"),
        _make_repo("beta", private=True, description=None, language=None),
    ]


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("x.JSON", "json"),
        ("x.csv", "csv"),
        ("x", "txt"),
        ("x.txt", "txt"),
        ("report.final.Csv", "csv"),
        ("archive.md", "txt"),
    ],
)
def test_get_output_format(filename, expected):
    assert get_output_format(filename) == expected


def test_format_as_text():
    content = format_as_text(_make_repos(), "octocat")
    assert content.startswith("GitHub Profile: https://github.com/octocat\n")
    assert "Total Repositories: 2" in content
    assert "Public Repositories: 1" in content
    assert "Private Repositories: 1" in content
    assert "- alpha (10 stars, 2 forks)" in content
    assert "  Homepage: https://alpha.dev" in content
    assert "  Description: No description provided" in content
    assert "  Language: Not specified" in content
    assert "  Private: Yes" in content
    assert "  Last Push: 2024-01-02T00:00:00Z" in content
    # Only repositories with a homepage get a homepage line.
    assert content.count("Homepage:") == 1


def test_format_as_json_round_trip():
    repos = _make_repos()
    data = json.loads(format_as_json(repos, "octocat"))
    assert data["profile"] == "https://github.com/octocat"
    assert data["username"] == "octocat"
    assert data["total_repositories"] == 2
    assert data["public_repositories"] == 1
    assert data["private_repositories"] == 1
    assert {r["name"] for r in data["repositories"]} == {"alpha", "beta"}


def test_format_as_json_uses_canonical_field_names():
    data = json.loads(format_as_json(_make_repos(), "octocat"))
    first = data["repositories"][0]
    assert list(first) == [
        "name", "description", "stars", "forks", "language", "private",
        "homepage", "repository_url", "created_at", "updated_at", "pushed_at",
    ]
    assert first["stars"] == 10
    assert "stargazers_count" not in first


def test_format_as_json_is_reproducible():
    repos = _make_repos()
    assert format_as_json(repos, "octocat") == format_as_json(repos, "octocat")


def test_format_as_json_empty():
    data = json.loads(format_as_json([], "octocat"))
    assert data["total_repositories"] == 0
    assert data["repositories"] == []


def _csv_rows(content: str) -> list[list[str]]:
    body = "\n".join(
        line for line in content.splitlines() if line and not line.startswith("#")
    )
    return list(csv.reader(io.StringIO(body)))


def test_format_as_csv_header_and_rows():
    content = format_as_csv(_make_repos(), "octocat")
    assert content.startswith("# GitHub Profile: https://github.com/octocat\n")
    assert "# Total Repositories: 2\n" in content
    assert "# Public: 1, Private: 1\n" in content
    rows = _csv_rows(content)
    assert rows[0][0] == "Name"
    assert rows[1][:4] == ["alpha", "The alpha project", "10", "2"]
    assert rows[2][5] == "true"
    assert len(rows) == 3


def test_format_as_csv_quotes_every_field():
    content = format_as_csv([_make_repo("alpha")], "octocat")
    row = content.strip().splitlines()[-1]
    assert row.startswith('"alpha","The alpha project","10","2"')


def test_format_as_csv_escapes_quotes_and_commas():
    tricky = _make_repo(
        "tricky",
        description='Says "hi", then leaves',
        homepage="https://x.dev/?a=1,b=2",
    )
    rows = _csv_rows(format_as_csv([tricky], "octocat"))
    assert rows[1][1] == 'Says "hi", then leaves'
    assert rows[1][6] == "https://x.dev/?a=1,b=2"


def test_format_analysis_report():
    repos = [
        _make_repo("nodesc", description=None),
        _make_repo("broken", homepage="ftp://broken"),
    ]
    analysis = analyze_repositories(repos)
    when = datetime(2024, 5, 1, tzinfo=timezone.utc)
    content = format_analysis_report(repos, analysis, "octocat", generated_at=when)

    assert content.startswith("Repository Analysis Report\n")
    assert "Analysis Date: 2024-05-01T00:00:00+00:00" in content
    assert "- 1 repositories missing descriptions" in content
    assert "- 1 repositories missing homepages" in content
    assert "- 1 repositories with potentially broken homepages" in content
    assert "REPOSITORIES MISSING DESCRIPTIONS:" in content
    assert "  Current Homepage: ftp://broken" in content
    assert "https://github.com/octocat/nodesc" in content


def test_format_analysis_report_omits_empty_sections():
    repos = [_make_repo("clean", homepage="https://clean.dev")]
    content = format_analysis_report(repos, analyze_repositories(repos), "octocat")
    assert "REPOSITORIES MISSING" not in content
    assert "- 0 repositories missing descriptions" in content


@pytest.mark.parametrize("suffix,check", [
    (".json", lambda text: json.loads(text)["total_repositories"] == 2),
    (".csv", lambda text: text.startswith("# GitHub Profile")),
    (".txt", lambda text: text.startswith("GitHub Profile")),
])
def test_write_repositories_to_file(tmp_path, suffix, check):
    path = tmp_path / f"repos{suffix}"
    output_format = write_repositories_to_file(_make_repos(), "octocat", str(path))
    assert output_format == suffix[1:]
    assert check(path.read_text(encoding="utf-8"))


def test_write_repositories_overwrites_existing_file(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("stale content\n", encoding="utf-8")
    write_repositories_to_file(_make_repos(), "octocat", str(path))
    assert "stale content" not in path.read_text(encoding="utf-8")


def test_write_to_missing_directory_raises_output_error(tmp_path):
    path = tmp_path / "nodir" / "repos.txt"
    with pytest.raises(OutputError, match="Cannot write"):
        write_repositories_to_file(_make_repos(), "octocat", str(path))
    assert not path.exists()


def test_write_analysis_to_file(tmp_path):
    repos = [_make_repo("nodesc", description=None)]
    path = tmp_path / "analysis.txt"
    write_analysis_to_file(repos, analyze_repositories(repos), "octocat", str(path))
    assert "REPOSITORIES MISSING DESCRIPTIONS:" in path.read_text(encoding="utf-8")


def test_render_summary(capsys):
    render_summary(_make_repos(), "octocat")
    captured = capsys.readouterr()
    assert "https://github.com/octocat" in captured.out
    assert "alpha" in captured.out
    assert "private" in captured.out


def test_render_analysis_summary(capsys):
    repos = [_make_repo("nodesc", description=None)]
    render_analysis_summary(analyze_repositories(repos))
    captured = capsys.readouterr()
    assert "Missing descriptions" in captured.out


def test_render_patch_preview(capsys):
    repo = _make_repo("alpha", has_wiki=True)
    render_patch_preview(repo, RepositoryUpdatePatch(description="New text", has_wiki=False))
    captured = capsys.readouterr()
    assert "New text" in captured.out
    assert "Wiki" in captured.out
    assert "Homepage" not in captured.out


def test_render_batch_outcomes(capsys):
    render_batch_outcomes([
        BatchUpdateOutcome("octocat", "a", success=True),
        BatchUpdateOutcome("octocat", "b", success=False, error="denied"),
    ])
    captured = capsys.readouterr()
    assert "octocat/b: denied" in captured.out
    assert "1 successful, 1 failed" in captured.out
