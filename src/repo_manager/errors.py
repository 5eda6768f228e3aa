"""Exception hierarchy for repo-manager."""

from __future__ import annotations


class RepoManagerError(Exception):
    """Base class for every error surfaced to the user."""


class TransportError(RepoManagerError):
    """The API was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(TransportError):
    """The supplied credential was rejected."""


class ValidationError(RepoManagerError):
    """Caller-supplied input failed a precondition."""


class UpdateError(RepoManagerError):
    """Updating a single repository failed."""

    def __init__(self, owner: str, name: str, message: str) -> None:
        super().__init__(f"Failed to update {owner}/{name}: {message}")
        self.owner = owner
        self.name = name
        self.reason = message


class OutputError(RepoManagerError):
    """An export or report file could not be written."""
