"""Data models for repo-manager."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

GITHUB_WEB_URL = "https://github.com"

SORT_KEYS = ("updated", "created", "pushed", "stars", "name", "full_name")
ACTIONS = ("fetch", "analyze", "edit", "batch-edit")


@dataclass(frozen=True)
class Repository:
    id: int
    name: str
    owner: str
    full_name: str
    html_url: str
    description: str | None = None
    homepage: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    private: bool = False
    has_issues: bool | None = None
    has_wiki: bool | None = None
    has_projects: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        """Build a Repository from a GitHub REST API repository payload."""
        owner = (data.get("owner") or {}).get("login", "")
        name = data["name"]
        return cls(
            id=data["id"],
            name=name,
            owner=owner,
            full_name=data.get("full_name") or f"{owner}/{name}",
            html_url=data.get("html_url") or f"{GITHUB_WEB_URL}/{owner}/{name}",
            description=data.get("description"),
            homepage=data.get("homepage"),
            language=data.get("language"),
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            private=bool(data.get("private", False)),
            has_issues=data.get("has_issues"),
            has_wiki=data.get("has_wiki"),
            has_projects=data.get("has_projects"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            pushed_at=data.get("pushed_at"),
        )


@dataclass(frozen=True)
class RepositoryUpdatePatch:
    """Sparse update payload: fields left as None are not sent."""

    description: str | None = None
    homepage: str | None = None
    private: bool | None = None
    has_issues: bool | None = None
    has_wiki: bool | None = None
    has_projects: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return only the fields that are set, as the API expects them."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        """True when the patch would change nothing."""
        return not self.to_payload()

    def render(self, name: str) -> RepositoryUpdatePatch:
        """Substitute ``{name}`` placeholders in the text fields."""
        return RepositoryUpdatePatch(
            description=_substitute(self.description, name),
            homepage=_substitute(self.homepage, name),
            private=self.private,
            has_issues=self.has_issues,
            has_wiki=self.has_wiki,
            has_projects=self.has_projects,
        )


def _substitute(template: str | None, name: str) -> str | None:
    if template is None:
        return None
    return template.replace("{name}", name)


@dataclass(frozen=True)
class BatchUpdateRequest:
    owner: str
    name: str
    patch: RepositoryUpdatePatch

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class BatchUpdateOutcome:
    owner: str
    name: str
    success: bool
    error: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class AnalysisResult:
    missing_description: list[Repository] = field(default_factory=list)
    missing_homepage: list[Repository] = field(default_factory=list)
    broken_homepage: list[Repository] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return (
            len(self.missing_description)
            + len(self.missing_homepage)
            + len(self.broken_homepage)
        )

    def affected(self) -> list[Repository]:
        """Distinct repositories across all categories, first-seen order."""
        seen: set[int] = set()
        result: list[Repository] = []
        for repo in self.missing_description + self.missing_homepage + self.broken_homepage:
            if repo.id not in seen:
                seen.add(repo.id)
                result.append(repo)
        return result


@dataclass(frozen=True)
class AuthInfo:
    username: str
    is_authenticated: bool


@dataclass
class RunConfiguration:
    token: str | None = None
    username: str | None = None
    sort: str = "updated"
    action: str = "fetch"
    output_file: str | None = None
    report_file: str | None = None
    base_url: str = "https://api.github.com"


def summarize_outcomes(outcomes: list[BatchUpdateOutcome]) -> tuple[int, int]:
    """Return ``(succeeded, failed)`` counts for a batch."""
    succeeded = sum(1 for o in outcomes if o.success)
    return succeeded, len(outcomes) - succeeded
