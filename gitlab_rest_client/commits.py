"""Commits API for project repositories.

GitLab API docs: https://docs.gitlab.com/ee/api/commits.html

Project IDs may be numeric or a "namespace/project" path; both are escaped
into a single path segment, as are commit SHAs and ref names.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import Field

from .models import Author, BuildState, Model, Response
from .options import ListOptions, RequestOptionFunc, parse_id, path_escape, wire

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .client import GitLabClient


class CommitStats(Model):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class Commit(Model):
    id: str = ""
    short_id: str = ""
    title: str = ""
    author_name: str = ""
    author_email: str = ""
    authored_date: datetime | None = None
    committer_name: str = ""
    committer_email: str = ""
    committed_date: datetime | None = None
    created_at: datetime | None = None
    message: str = ""
    parent_ids: list[str] = Field(default_factory=list)
    stats: CommitStats | None = None
    status: BuildState | str | None = Field(default=None, union_mode="left_to_right")


class CommitRef(Model):
    """A branch or tag a commit has been pushed to."""

    type: str = ""
    name: str = ""


class Diff(Model):
    diff: str = ""
    new_path: str = ""
    old_path: str = ""
    a_mode: str = ""
    b_mode: str = ""
    new_file: bool = False
    renamed_file: bool = False
    deleted_file: bool = False


class CommitComment(Model):
    note: str = ""
    path: str = ""
    line: int = 0
    line_type: str = ""
    author: Author = Field(default_factory=Author)


class CommitStatus(Model):
    id: int = 0
    sha: str = ""
    ref: str = ""
    status: str = ""
    name: str = ""
    target_url: str = ""
    description: str = ""
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    author: Author = Field(default_factory=Author)


class MergeRequest(Model):
    """The subset of merge request fields returned for a commit lookup."""

    id: int = 0
    iid: int = 0
    project_id: int = 0
    title: str = ""
    description: str = ""
    state: str = ""
    target_branch: str = ""
    source_branch: str = ""
    source_project_id: int = 0
    target_project_id: int = 0
    author: Author | None = None
    assignee: Author | None = None
    labels: list[str] = Field(default_factory=list)
    draft: bool = False
    work_in_progress: bool = False
    merge_status: str = ""
    sha: str = ""
    merge_commit_sha: str = ""
    web_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    merged_at: datetime | None = None
    closed_at: datetime | None = None


class FileAction(str, Enum):
    CREATE = "create"
    DELETE = "delete"
    MOVE = "move"
    UPDATE = "update"


@dataclass
class CommitAction:
    """One file change inside create_commit."""

    action: FileAction | None = wire(omitempty=False)
    file_path: str | None = wire(omitempty=False)
    previous_path: str | None = None
    content: str | None = None
    encoding: str | None = None  # text or base64


@dataclass
class ListCommitsOptions(ListOptions):
    ref_name: str | None = None
    since: datetime | None = None
    until: datetime | None = None
    path: str | None = None
    all: bool | None = None
    with_stats: bool | None = None


@dataclass
class GetCommitRefsOptions(ListOptions):
    type: str | None = None  # branch, tag or all


@dataclass
class CreateCommitOptions:
    branch: str | None = wire(omitempty=False)
    commit_message: str | None = wire(omitempty=False)
    start_branch: str | None = None
    actions: list[CommitAction] | None = wire(omitempty=False)
    author_email: str | None = None
    author_name: str | None = None


@dataclass
class PostCommitCommentOptions:
    """Comment body. ``path``, ``line`` and ``line_type`` go together for inline comments."""

    note: str | None = None
    path: str | None = wire(omitempty=False)
    line: int | None = wire(omitempty=False)
    line_type: str | None = wire(omitempty=False)


@dataclass
class GetCommitStatusesOptions(ListOptions):
    ref: str | None = None
    stage: str | None = None
    name: str | None = None
    all: bool | None = None


@dataclass
class SetCommitStatusOptions:
    state: BuildState | None = wire(omitempty=False)
    ref: str | None = None
    name: str | None = None
    context: str | None = None
    target_url: str | None = None
    description: str | None = None


@dataclass
class CherryPickCommitOptions:
    target_branch: str | None = wire("branch")


GetCommitDiffOptions = ListOptions
GetCommitCommentsOptions = ListOptions


def _project_path(pid: int | str) -> str:
    return f"projects/{path_escape(parse_id(pid))}"


def _commit_path(pid: int | str, sha: str) -> str:
    return f"{_project_path(pid)}/repository/commits/{path_escape(sha)}"


class CommitsService:
    """Methods for the commit related parts of the GitLab API."""

    def __init__(self, client: GitLabClient):
        self.client = client

    def list_commits(
        self,
        pid: int | str,
        opt: ListCommitsOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[Commit], Response]:
        """List repository commits in a project."""
        req = self.client.new_request("GET", f"{_project_path(pid)}/repository/commits", opt, options)
        return self.client.do(req, Commit, many=True)

    def get_commit_refs(
        self,
        pid: int | str,
        sha: str,
        opt: GetCommitRefsOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[CommitRef], Response]:
        """Get all branches and tags a commit is pushed to."""
        req = self.client.new_request("GET", f"{_commit_path(pid, sha)}/refs", opt, options)
        return self.client.do(req, CommitRef, many=True)

    def get_commit(
        self, pid: int | str, sha: str, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[Commit, Response]:
        """Get a commit by hash, or by the name of a branch or tag."""
        req = self.client.new_request("GET", _commit_path(pid, sha), None, options)
        return self.client.do(req, Commit)

    def create_commit(
        self,
        pid: int | str,
        opt: CreateCommitOptions,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[Commit, Response]:
        """Create a commit with multiple file actions."""
        req = self.client.new_request("POST", f"{_project_path(pid)}/repository/commits", opt, options)
        return self.client.do(req, Commit)

    def get_commit_diff(
        self,
        pid: int | str,
        sha: str,
        opt: GetCommitDiffOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[Diff], Response]:
        req = self.client.new_request("GET", f"{_commit_path(pid, sha)}/diff", opt, options)
        return self.client.do(req, Diff, many=True)

    def get_commit_comments(
        self,
        pid: int | str,
        sha: str,
        opt: GetCommitCommentsOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[CommitComment], Response]:
        req = self.client.new_request("GET", f"{_commit_path(pid, sha)}/comments", opt, options)
        return self.client.do(req, CommitComment, many=True)

    def post_commit_comment(
        self,
        pid: int | str,
        sha: str,
        opt: PostCommitCommentOptions,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[CommitComment, Response]:
        """Comment on a commit, or on one line of it when path/line/line_type are set."""
        req = self.client.new_request("POST", f"{_commit_path(pid, sha)}/comments", opt, options)
        return self.client.do(req, CommitComment)

    def get_commit_statuses(
        self,
        pid: int | str,
        sha: str,
        opt: GetCommitStatusesOptions | None = None,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[list[CommitStatus], Response]:
        req = self.client.new_request("GET", f"{_commit_path(pid, sha)}/statuses", opt, options)
        return self.client.do(req, CommitStatus, many=True)

    def set_commit_status(
        self,
        pid: int | str,
        sha: str,
        opt: SetCommitStatusOptions,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[CommitStatus, Response]:
        """Post a build status to a commit.

        Note the path: this lives under projects/:id/statuses, not under
        repository/commits.
        """
        req = self.client.new_request("POST", f"{_project_path(pid)}/statuses/{path_escape(sha)}", opt, options)
        return self.client.do(req, CommitStatus)

    def get_merge_requests_by_commit(
        self, pid: int | str, sha: str, options: Sequence[RequestOptionFunc] = ()
    ) -> tuple[list[MergeRequest], Response]:
        """List merge requests that introduced a commit."""
        req = self.client.new_request("GET", f"{_commit_path(pid, sha)}/merge_requests", None, options)
        return self.client.do(req, MergeRequest, many=True)

    def cherry_pick_commit(
        self,
        pid: int | str,
        sha: str,
        opt: CherryPickCommitOptions,
        options: Sequence[RequestOptionFunc] = (),
    ) -> tuple[Commit, Response]:
        """Cherry-pick a commit onto the given branch."""
        req = self.client.new_request("POST", f"{_commit_path(pid, sha)}/cherry_pick", opt, options)
        return self.client.do(req, Commit)
