"""Authentication resolution and paginated repository listing."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import AuthenticationError, ValidationError
from .github.client import PAGE_SIZE, GitHubClient
from .models import AuthInfo, Repository

logger = logging.getLogger(__name__)


async def resolve_authentication(
    client: GitHubClient,
    username: str | None = None,
    ask_username: Callable[[], str] | None = None,
) -> AuthInfo:
    """Work out whose repositories to list.

    A rejected token is downgraded to anonymous access with a warning; in
    that case (or with no token at all) ``username`` is required. When it is
    blank, ``ask_username`` is called once to supply it.
    """
    if client.has_token:
        try:
            user = await client.get_authenticated_user()
        except AuthenticationError as exc:
            logger.warning(
                "Invalid token (%s), falling back to unauthenticated access", exc
            )
        else:
            logger.info("Authenticated as %s", user["login"])
            return AuthInfo(username=user["login"], is_authenticated=True)

    if (not username or not username.strip()) and ask_username is not None:
        username = ask_username()
    if not username or not username.strip():
        raise ValidationError("Username is required")
    return AuthInfo(username=username.strip(), is_authenticated=False)


async def fetch_repositories(
    client: GitHubClient,
    subject: AuthInfo,
    sort: str | None = "updated",
    page_size: int = PAGE_SIZE,
) -> list[Repository]:
    """Fetch every repository for ``subject``, following pagination.

    Pages are concatenated in server order; any error aborts the whole fetch.
    """
    collected: list[Repository] = []
    page = 1
    while True:
        if subject.is_authenticated:
            batch = await client.list_authenticated_repos(
                page=page, per_page=page_size, sort=sort
            )
        else:
            batch = await client.list_user_repos(
                subject.username, page=page, per_page=page_size, sort=sort
            )
        collected.extend(Repository.from_api(item) for item in batch)
        if len(batch) < page_size:
            break
        page += 1

    public = sum(1 for r in collected if not r.private)
    logger.info(
        "Found %d repositories for %s (%d public, %d private)",
        len(collected), subject.username, public, len(collected) - public,
    )
    return collected
