"""Typed client for the GitLab REST API (v4).

Each resource group is a service hanging off a shared GitLabClient:

    with GitLabClient() as gl:
        user, resp = gl.users.get_user(42)
        commits, resp = gl.commits.list_commits("group/project", ListCommitsOptions(per_page=50))
"""

from .cli import main
from .client import GitLabClient
from .commits import CommitsService, ListCommitsOptions
from .errors import (
    DecodeError,
    ErrorResponse,
    GitLabError,
    UnexpectedStatusError,
    UserBlockedByLdapError,
    UserNotFoundError,
    UserStateError,
)
from .models import Response
from .options import ListOptions, with_header, with_sudo, with_token
from .users import ListUsersOptions, UsersService

__all__ = [
    "main",
    "GitLabClient",
    "CommitsService",
    "UsersService",
    "ListOptions",
    "ListCommitsOptions",
    "ListUsersOptions",
    "Response",
    "with_header",
    "with_sudo",
    "with_token",
    "GitLabError",
    "ErrorResponse",
    "DecodeError",
    "UserStateError",
    "UserBlockedByLdapError",
    "UserNotFoundError",
    "UnexpectedStatusError",
]

if __name__ == "__main__":
    main()
