"""Users API: users, SSH keys, emails, impersonation tokens, activity, status.

GitLab API docs: https://docs.gitlab.com/ee/api/users.html
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING

from pydantic import Field

from .errors import (
    ErrorResponse,
    UnexpectedStatusError,
    UserBlockedByLdapError,
    UserNotFoundError,
)
from .models import CustomAttribute, Model, Response
from .options import ListOptions, RequestOptionFunc, parse_id, path_escape, wire

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .client import GitLabClient

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User does not exist"
BLOCK_FORBIDDEN = "Cannot block a user that is already blocked by LDAP synchronization"
UNBLOCK_FORBIDDEN = "Cannot unblock a user that is blocked by LDAP synchronization"


class UserIdentity(Model):
    provider: str = ""
    extern_uid: str = ""


class User(Model):
    """A GitLab user account."""

    id: int = 0
    username: str = ""
    email: str = ""
    name: str = ""
    state: str = ""
    created_at: datetime | None = None
    bio: str = ""
    location: str = ""
    public_email: str = ""
    skype: str = ""
    linkedin: str = ""
    twitter: str = ""
    website_url: str = ""
    organization: str = ""
    extern_uid: str = ""
    provider: str = ""
    theme_id: int = 0
    last_activity_on: date | None = None
    color_scheme_id: int = 0
    is_admin: bool = False
    avatar_url: str = ""
    can_create_group: bool = False
    can_create_project: bool = False
    projects_limit: int = 0
    current_sign_in_at: datetime | None = None
    last_sign_in_at: datetime | None = None
    confirmed_at: datetime | None = None
    two_factor_enabled: bool = False
    identities: list[UserIdentity] = Field(default_factory=list)
    external: bool = False
    private_profile: bool = False
    shared_runners_minutes_limit: int = 0
    custom_attributes: list[CustomAttribute] = Field(default_factory=list)


class SSHKey(Model):
    id: int = 0
    title: str = ""
    key: str = ""
    created_at: datetime | None = None


class Email(Model):
    id: int = 0
    email: str = ""


class ImpersonationToken(Model):
    """An impersonation token; ``token`` is only filled in on creation."""

    id: int = 0
    name: str = ""
    active: bool = False
    token: str = ""
    scopes: list[str] = Field(default_factory=list)
    revoked: bool = False
    created_at: datetime | None = None
    expires_at: date | None = None


class UserActivity(Model):
    username: str = ""
    last_activity_on: date | None = None


class UserStatus(Model):
    emoji: str = ""
    message: str = ""
    message_html: str = ""


@dataclass
class ListUsersOptions(ListOptions):
    """Filters for list_users. Everything after ``blocked`` needs admin rights."""

    active: bool | None = None
    blocked: bool | None = None
    search: str | None = None
    username: str | None = None
    external_uid: str | None = wire("extern_uid")
    provider: str | None = None
    created_before: datetime | None = None
    created_after: datetime | None = None
    order_by: str | None = None
    sort: str | None = None
    with_custom_attributes: bool | None = None


@dataclass
class CreateUserOptions:
    email: str | None = None
    password: str | None = None
    reset_password: bool | None = None
    username: str | None = None
    name: str | None = None
    skype: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    website_url: str | None = None
    organization: str | None = None
    projects_limit: int | None = None
    extern_uid: str | None = None
    provider: str | None = None
    bio: str | None = None
    location: str | None = None
    admin: bool | None = None
    can_create_group: bool | None = None
    skip_confirmation: bool | None = None
    external: bool | None = None


@dataclass
class ModifyUserOptions:
    email: str | None = None
    password: str | None = None
    username: str | None = None
    name: str | None = None
    skype: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    website_url: str | None = None
    organization: str | None = None
    projects_limit: int | None = None
    extern_uid: str | None = None
    provider: str | None = None
    bio: str | None = None
    location: str | None = None
    admin: bool | None = None
    can_create_group: bool | None = None
    skip_reconfirmation: bool | None = None
    external: bool | None = None


@dataclass
class AddSSHKeyOptions:
    title: str | None = None
    key: str | None = None


@dataclass
class AddEmailOptions:
    email: str | None = None


@dataclass
class GetAllImpersonationTokensOptions(ListOptions):
    state: str | None = None  # all, active or inactive


@dataclass
class CreateImpersonationTokenOptions:
    """``expires_at`` takes a date or a full timestamp; GitLab keeps only the day."""

    name: str | None = None
    scopes: list[str] | None = None
    expires_at: datetime | date | None = None


@dataclass
class GetUserActivitiesOptions:
    from_date: date | None = wire("from")


@dataclass
class UserStatusOptions:
    emoji: str | None = None
    message: str | None = None


# Plain pagination is all these endpoints accept
ListSSHKeysForUserOptions = ListOptions
ListEmailsForUserOptions = ListOptions


def _segment(value: int | str) -> str:
    return path_escape(parse_id(value))


class UsersService:
    """Methods for the user related parts of the GitLab API."""

    def __init__(self, client: GitLabClient):
        self.client = client

    def list_users(
        self, opt: ListUsersOptions | None = None, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[list[User], Response]:
        """Get a list of users."""
        req = self.client.new_request("GET", "users", opt, options)
        return self.client.do(req, User, many=True)

    def get_user(self, user: int, options: Sequence[RequestOptionFunc] = ()) -> tuple[User, Response]:
        """Get a single user."""
        req = self.client.new_request("GET", f"users/{_segment(user)}", None, options)
        return self.client.do(req, User)

    def create_user(
        self, opt: CreateUserOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[User, Response]:
        """Create a new user. Only administrators can create users."""
        req = self.client.new_request("POST", "users", opt, options)
        return self.client.do(req, User)

    def modify_user(
        self, user: int, opt: ModifyUserOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[User, Response]:
        """Modify an existing user. Only administrators can change user attributes."""
        req = self.client.new_request("PUT", f"users/{_segment(user)}", opt, options)
        return self.client.do(req, User)

    def delete_user(self, user: int, options: Sequence[RequestOptionFunc] = ()) -> Response:
        """Delete a user (admin only).

        Idempotent: deleting a user ID that does not exist still answers
        200 OK. The body differs (the deleted user or nothing), so it is not
        decoded.
        """
        req = self.client.new_request("DELETE", f"users/{_segment(user)}", None, options)
        _, resp = self.client.do(req)
        return resp

    def current_user(self, options: Sequence[RequestOptionFunc] = ()) -> tuple[User, Response]:
        """Get the currently authenticated user."""
        req = self.client.new_request("GET", "user", None, options)
        return self.client.do(req, User)

    def list_ssh_keys(self, options: Sequence[RequestOptionFunc] = ()) -> tuple[list[SSHKey], Response]:
        """List the current user's SSH keys."""
        req = self.client.new_request("GET", "user/keys", None, options)
        return self.client.do(req, SSHKey, many=True)

    def list_ssh_keys_for_user(
        self,
        user: int,
        opt: ListSSHKeysForUserOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[SSHKey], Response]:
        """List a given user's SSH keys (admin only)."""
        req = self.client.new_request("GET", f"users/{_segment(user)}/keys", opt, options)
        return self.client.do(req, SSHKey, many=True)

    def get_ssh_key(self, key: int, options: Sequence[RequestOptionFunc] = ()) -> tuple[SSHKey, Response]:
        req = self.client.new_request("GET", f"user/keys/{_segment(key)}", None, options)
        return self.client.do(req, SSHKey)

    def add_ssh_key(
        self, opt: AddSSHKeyOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[SSHKey, Response]:
        """Create a key owned by the current user."""
        req = self.client.new_request("POST", "user/keys", opt, options)
        return self.client.do(req, SSHKey)

    def add_ssh_key_for_user(
        self, user: int, opt: AddSSHKeyOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[SSHKey, Response]:
        """Create a key owned by the given user (admin only)."""
        req = self.client.new_request("POST", f"users/{_segment(user)}/keys", opt, options)
        return self.client.do(req, SSHKey)

    def delete_ssh_key(self, key: int, options: Sequence[RequestOptionFunc] = ()) -> Response:
        """Delete one of the current user's keys.

        Deleting a key that is already gone still answers 200 OK.
        """
        req = self.client.new_request("DELETE", f"user/keys/{_segment(key)}", None, options)
        _, resp = self.client.do(req)
        return resp

    def delete_ssh_key_for_user(
        self, user: int, key: int, options: Sequence[RequestOptionFunc] = ()
    ) -> Response:
        """Delete a key owned by the given user (admin only)."""
        req = self.client.new_request("DELETE", f"users/{_segment(user)}/keys/{_segment(key)}", None, options)
        _, resp = self.client.do(req)
        return resp

    def _set_blocked(self, user: int, action: str, forbidden: str, options) -> None:
        req = self.client.new_request("POST", f"users/{_segment(user)}/{action}", None, options)
        try:
            _, resp = self.client.do(req)
            status = resp.status
        except ErrorResponse as e:
            status = e.status

        if status == 201:
            return
        logger.debug("%s user %s failed with status %s", action, user, status)
        if status == 403:
            raise UserBlockedByLdapError(forbidden, status)
        if status == 404:
            raise UserNotFoundError(USER_NOT_FOUND, status)
        raise UnexpectedStatusError(status)

    def block_user(self, user: int, options: Sequence[RequestOptionFunc] = ()) -> None:
        """Block the given user (admin only).

        Raises:
            UserBlockedByLdapError: 403, the user is blocked by LDAP sync
            UserNotFoundError: 404
            UnexpectedStatusError: any status other than 201
        """
        self._set_blocked(user, "block", BLOCK_FORBIDDEN, options)

    def unblock_user(self, user: int, options: Sequence[RequestOptionFunc] = ()) -> None:
        """Unblock the given user (admin only). Raises like block_user."""
        self._set_blocked(user, "unblock", UNBLOCK_FORBIDDEN, options)

    def list_emails(self, options: Sequence[RequestOptionFunc] = ()) -> tuple[list[Email], Response]:
        """List the current user's emails."""
        req = self.client.new_request("GET", "user/emails", None, options)
        return self.client.do(req, Email, many=True)

    def list_emails_for_user(
        self,
        user: int,
        opt: ListEmailsForUserOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[Email], Response]:
        """List a given user's emails (admin only)."""
        req = self.client.new_request("GET", f"users/{_segment(user)}/emails", opt, options)
        return self.client.do(req, Email, many=True)

    def get_email(self, email: int, options: Sequence[RequestOptionFunc] = ()) -> tuple[Email, Response]:
        req = self.client.new_request("GET", f"user/emails/{_segment(email)}", None, options)
        return self.client.do(req, Email)

    def add_email(
        self, opt: AddEmailOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[Email, Response]:
        req = self.client.new_request("POST", "user/emails", opt, options)
        return self.client.do(req, Email)

    def add_email_for_user(
        self, user: int, opt: AddEmailOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[Email, Response]:
        """Add an email to the given user (admin only)."""
        req = self.client.new_request("POST", f"users/{_segment(user)}/emails", opt, options)
        return self.client.do(req, Email)

    def delete_email(self, email: int, options: Sequence[RequestOptionFunc] = ()) -> Response:
        """Delete one of the current user's emails. Idempotent, like delete_ssh_key."""
        req = self.client.new_request("DELETE", f"user/emails/{_segment(email)}", None, options)
        _, resp = self.client.do(req)
        return resp

    def delete_email_for_user(
        self, user: int, email: int, options: Sequence[RequestOptionFunc] = ()
    ) -> Response:
        req = self.client.new_request("DELETE", f"users/{_segment(user)}/emails/{_segment(email)}", None, options)
        _, resp = self.client.do(req)
        return resp

    def get_all_impersonation_tokens(
        self,
        user: int,
        opt: GetAllImpersonationTokensOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[ImpersonationToken], Response]:
        """List a user's impersonation tokens, optionally filtered by state."""
        req = self.client.new_request("GET", f"users/{_segment(user)}/impersonation_tokens", opt, options)
        return self.client.do(req, ImpersonationToken, many=True)

    def get_impersonation_token(
        self, user: int, token: int, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[ImpersonationToken, Response]:
        path = f"users/{_segment(user)}/impersonation_tokens/{_segment(token)}"
        req = self.client.new_request("GET", path, None, options)
        return self.client.do(req, ImpersonationToken)

    def create_impersonation_token(
        self,
        user: int,
        opt: CreateImpersonationTokenOptions,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[ImpersonationToken, Response]:
        req = self.client.new_request("POST", f"users/{_segment(user)}/impersonation_tokens", opt, options)
        return self.client.do(req, ImpersonationToken)

    def revoke_impersonation_token(
        self, user: int, token: int, options: Sequence[RequestOptionFunc] = ()
    ) -> Response:
        path = f"users/{_segment(user)}/impersonation_tokens/{_segment(token)}"
        req = self.client.new_request("DELETE", path, None, options)
        _, resp = self.client.do(req)
        return resp

    def get_user_activities(
        self, opt: GetUserActivitiesOptions | None = None, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[list[UserActivity], Response]:
        """Get last activity dates for all users (admin only)."""
        req = self.client.new_request("GET", "user/activities", opt, options)
        return self.client.do(req, UserActivity, many=True)

    def current_user_status(self, options: Sequence[RequestOptionFunc] = ()) -> tuple[UserStatus, Response]:
        req = self.client.new_request("GET", "user/status", None, options)
        return self.client.do(req, UserStatus)

    def get_user_status(
        self, user: int | str, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[UserStatus, Response]:
        """Get a user's status by numeric ID or username."""
        req = self.client.new_request("GET", f"users/{_segment(user)}/status", None, options)
        return self.client.do(req, UserStatus)

    def set_user_status(
        self, opt: UserStatusOptions, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[UserStatus, Response]:
        """Set the current user's status."""
        req = self.client.new_request("PUT", "user/status", opt, options)
        return self.client.do(req, UserStatus)
