"""Single and batch repository metadata updates."""

from __future__ import annotations

import logging

from .analyzer import is_blank
from .errors import RepoManagerError, UpdateError
from .github.client import GitHubClient
from .models import (
    BatchUpdateOutcome,
    BatchUpdateRequest,
    Repository,
    RepositoryUpdatePatch,
    summarize_outcomes,
)

logger = logging.getLogger(__name__)


async def update_repository(
    client: GitHubClient, owner: str, name: str, patch: RepositoryUpdatePatch
) -> Repository:
    """Apply ``patch`` to ``owner/name`` and return the server's new state."""
    try:
        data = await client.update_repository(owner, name, patch.to_payload())
    except RepoManagerError as exc:
        raise UpdateError(owner, name, str(exc)) from exc
    try:
        updated = Repository.from_api(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise UpdateError(owner, name, f"unexpected response payload ({exc!r})") from exc
    logger.info("Updated %s/%s", owner, name)
    return updated


async def _attempt(client: GitHubClient, request: BatchUpdateRequest) -> BatchUpdateOutcome:
    """Run one update and turn an UpdateError into a failed outcome."""
    try:
        await update_repository(client, request.owner, request.name, request.patch)
    except UpdateError as exc:
        logger.warning("%s", exc)
        return BatchUpdateOutcome(request.owner, request.name, success=False, error=exc.reason)
    return BatchUpdateOutcome(request.owner, request.name, success=True)


async def update_batch(
    client: GitHubClient, requests: list[BatchUpdateRequest]
) -> list[BatchUpdateOutcome]:
    """Apply each request in order, one at a time.

    A failed item is recorded and the batch moves on; the result has exactly
    one outcome per request, in request order.
    """
    outcomes = [await _attempt(client, request) for request in requests]
    succeeded, failed = summarize_outcomes(outcomes)
    logger.info("Batch update completed: %d successful, %d failed", succeeded, failed)
    return outcomes


def _request(repo: Repository, patch: RepositoryUpdatePatch) -> BatchUpdateRequest:
    return BatchUpdateRequest(owner=repo.owner, name=repo.name, patch=patch)


def _select(repositories: list[Repository], names: list[str]) -> list[Repository]:
    wanted = set(names)
    return [r for r in repositories if r.name in wanted]


def plan_description_template(
    repositories: list[Repository], template: str
) -> list[BatchUpdateRequest]:
    """Give every repository without a description ``template`` ({name} expanded)."""
    patch = RepositoryUpdatePatch(description=template)
    return [
        _request(r, patch.render(r.name))
        for r in repositories
        if is_blank(r.description)
    ]


def plan_privacy_change(
    repositories: list[Repository], names: list[str], make_private: bool
) -> list[BatchUpdateRequest]:
    """Flip the named repositories to ``make_private``, skipping those already there."""
    patch = RepositoryUpdatePatch(private=make_private)
    return [
        _request(r, patch)
        for r in _select(repositories, names)
        if r.private != make_private
    ]


def plan_custom_updates(
    repositories: list[Repository], names: list[str], patch: RepositoryUpdatePatch
) -> list[BatchUpdateRequest]:
    """Apply a template patch to each named repository, in listing order."""
    if patch.is_empty():
        return []
    return [_request(r, patch.render(r.name)) for r in _select(repositories, names)]


def plan_homepage_fixes(
    repositories: list[Repository], homepages: dict[str, str]
) -> list[BatchUpdateRequest]:
    """Build homepage updates from a ``name -> new homepage`` mapping.

    An empty new homepage clears the field.
    """
    return [
        _request(r, RepositoryUpdatePatch(homepage=homepages[r.name].strip()))
        for r in repositories
        if r.name in homepages
    ]
