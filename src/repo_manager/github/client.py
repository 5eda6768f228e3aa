"""Async GitHub REST API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .. import __version__
from ..errors import AuthenticationError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
PAGE_SIZE = 100

# GitHub only understands these values for the ``sort`` query parameter.
_SERVER_SORTS = {
    "updated": "updated",
    "created": "created",
    "pushed": "pushed",
    "full_name": "full_name",
    "name": "full_name",
}


def _server_sort(sort: str | None) -> str | None:
    if sort is None:
        return None
    return _SERVER_SORTS.get(sort)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"GitHub {response.status_code}: {body['message']}"
    return f"GitHub {response.status_code}: {response.reason_phrase}"


class GitHubClient:
    """Thin wrapper over the repository endpoints of the GitHub REST API.

    Use as an async context manager so the underlying connection pool is
    closed when the run finishes.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"repo-manager/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.has_token = bool(token)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("%s %s %s", method, path, params or "")
        try:
            response = await self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = _error_message(exc.response)
            if status == 401:
                raise AuthenticationError(message, status_code=status) from exc
            raise TransportError(message, status_code=status) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"GitHub request error: {type(exc).__name__} {exc}"
            ) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"GitHub {response.status_code}: response body is not valid JSON",
                status_code=response.status_code,
            ) from exc

    async def get_authenticated_user(self) -> dict[str, Any]:
        return await self._request("GET", "/user")

    async def list_user_repos(
        self,
        username: str,
        page: int = 1,
        per_page: int = PAGE_SIZE,
        sort: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return one page of public repositories owned by ``username``."""
        params: dict[str, Any] = {
            "type": "owner",
            "direction": "desc",
            "per_page": per_page,
            "page": page,
        }
        server_sort = _server_sort(sort)
        if server_sort:
            params["sort"] = server_sort
        return await self._request("GET", f"/users/{username}/repos", params=params)

    async def list_authenticated_repos(
        self,
        page: int = 1,
        per_page: int = PAGE_SIZE,
        sort: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return one page of repositories owned by the token's principal."""
        params: dict[str, Any] = {
            "type": "owner",
            "direction": "desc",
            "per_page": per_page,
            "page": page,
        }
        server_sort = _server_sort(sort)
        if server_sort:
            params["sort"] = server_sort
        return await self._request("GET", "/user/repos", params=params)

    async def get_repository(self, owner: str, name: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{name}")

    async def update_repository(
        self, owner: str, name: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PATCH", f"/repos/{owner}/{name}", json=payload)
