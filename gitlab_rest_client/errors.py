"""Exceptions raised by the GitLab client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Response


class GitLabError(Exception):
    """Base class for every error raised by this package."""


class ErrorResponse(GitLabError):
    """The API answered with a non-2xx status."""

    def __init__(self, response: Response, message: str):
        self.response = response
        self.status = response.status
        self.message = message
        super().__init__(f"{response.method} {response.url}: {response.status} {message}".rstrip())


class DecodeError(GitLabError):
    """A 2xx response body was not JSON or did not match the expected model."""


class UserStateError(GitLabError):
    """Base for block/unblock failures, carrying a stable error code."""

    code = "user_state"

    def __init__(self, message: str, status: int):
        self.status = status
        super().__init__(message)


class UserBlockedByLdapError(UserStateError):
    code = "blocked_by_ldap"


class UserNotFoundError(UserStateError):
    code = "user_not_found"


class UnexpectedStatusError(UserStateError):
    code = "unexpected_status"

    def __init__(self, status: int):
        super().__init__(f"Received unexpected result code: {status}", status)
