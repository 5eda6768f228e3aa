"""Detection of repositories with missing or malformed metadata."""

from __future__ import annotations

from .models import AnalysisResult, Repository

_ACCEPTED_PREFIXES = ("http://", "https://", "www.")
_LOCAL_MARKERS = ("localhost", "127.0.0.1")


def is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def is_broken_homepage(homepage: str | None) -> bool:
    """Heuristic check for a homepage that probably does not work.

    Only the prefix and local-host markers are inspected; this is not full
    URL validation, so ``www.`` strings are accepted as-is.
    """
    if not homepage:
        return False
    lowered = homepage.lower()
    return not lowered.startswith(_ACCEPTED_PREFIXES) or any(
        marker in lowered for marker in _LOCAL_MARKERS
    )


def analyze_repositories(repositories: list[Repository]) -> AnalysisResult:
    return AnalysisResult(
        missing_description=[r for r in repositories if is_blank(r.description)],
        missing_homepage=[r for r in repositories if is_blank(r.homepage)],
        broken_homepage=[r for r in repositories if is_broken_homepage(r.homepage)],
    )
