"""Integration tests for the commits service."""

from datetime import datetime, timezone

import pytest

from gitlab_rest_client.commits import (
    CherryPickCommitOptions,
    Commit,
    CommitAction,
    CreateCommitOptions,
    FileAction,
    GetCommitRefsOptions,
    GetCommitStatusesOptions,
    ListCommitsOptions,
    MergeRequest,
    PostCommitCommentOptions,
    SetCommitStatusOptions,
)
from gitlab_rest_client.errors import ErrorResponse
from gitlab_rest_client.models import BuildState
from gitlab_rest_client.options import ListOptions

SHA = "ed899a2f4b50b4370feeea94676502b42383c746"

COMMIT = {
    "id": SHA,
    "short_id": "ed899a2f4b5",
    "title": "Replace sanitize with escape once",
    "author_name": "Example User",
    "author_email": "user@example.com",
    "authored_date": "2012-09-20T11:50:22+03:00",
    "committed_date": "2012-09-20T11:50:22+03:00",
    "created_at": "2012-09-20T11:50:22+03:00",
    "message": "Replace sanitize with escape once",
    "parent_ids": ["6104942438c14ec7bd21c6cd5bd995272b3faff6"],
    "stats": {"additions": 15, "deletions": 10, "total": 25},
    "status": "running",
}


class TestProjectIdentifiers:
    def test_numeric_project_id(self, client, gitlab):
        gitlab.respond(body=[])
        client.commits.list_commits(5)
        assert gitlab.last_path == "projects/5/repository/commits"

    def test_project_path_is_one_segment(self, client, gitlab):
        gitlab.respond(body=[])
        client.commits.list_commits("group/sub/project")
        assert gitlab.last_path == "projects/group%2Fsub%2Fproject/repository/commits"

    def test_ref_names_are_escaped(self, client, gitlab):
        gitlab.respond(body=COMMIT)
        client.commits.get_commit(5, "feature/login")
        assert gitlab.last_path == "projects/5/repository/commits/feature%2Flogin"

    def test_invalid_project_id(self, client, gitlab):
        with pytest.raises(TypeError, match="invalid ID type"):
            client.commits.list_commits(["not", "an", "id"])
        assert gitlab.requests == []


class TestCommits:
    def test_list_commits(self, client, gitlab):
        gitlab.respond(body=[COMMIT, {**COMMIT, "id": "6104942438c14ec7bd21c6cd5bd995272b3faff6"}])
        commits, _ = client.commits.list_commits(5)
        assert gitlab.last.method == "GET"
        assert gitlab.last_query == []
        assert [c.id for c in commits] == [SHA, "6104942438c14ec7bd21c6cd5bd995272b3faff6"]
        assert commits[0].stats.total == 25
        assert commits[0].status is BuildState.RUNNING

    def test_list_commits_options(self, client, gitlab):
        gitlab.respond(body=[])
        opt = ListCommitsOptions(
            per_page=100,
            ref_name="main",
            since=datetime(2024, 1, 1, tzinfo=timezone.utc),
            path="README.md",
            with_stats=True,
        )
        client.commits.list_commits(5, opt)
        assert gitlab.last_query == [
            ("per_page", "100"),
            ("ref_name", "main"),
            ("since", "2024-01-01T00:00:00Z"),
            ("path", "README.md"),
            ("with_stats", "true"),
        ]

    def test_get_commit(self, client, gitlab):
        gitlab.respond(body=COMMIT)
        commit, _ = client.commits.get_commit("group/project", SHA)
        assert gitlab.last.method == "GET"
        assert gitlab.last_path == f"projects/group%2Fproject/repository/commits/{SHA}"
        assert isinstance(commit, Commit)
        assert commit.parent_ids == ["6104942438c14ec7bd21c6cd5bd995272b3faff6"]
        assert commit.authored_date.utcoffset().total_seconds() == 3 * 3600

    def test_get_commit_missing(self, client, gitlab):
        gitlab.respond(404, {"message": "404 Commit Not Found"})
        with pytest.raises(ErrorResponse, match="404 Commit Not Found"):
            client.commits.get_commit(5, "deadbeef")

    def test_get_commit_refs(self, client, gitlab):
        gitlab.respond(body=[{"type": "branch", "name": "main"}, {"type": "tag", "name": "v1.0"}])
        refs, _ = client.commits.get_commit_refs(5, SHA, GetCommitRefsOptions(type="all"))
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/refs"
        assert gitlab.last_query == [("type", "all")]
        assert [(r.type, r.name) for r in refs] == [("branch", "main"), ("tag", "v1.0")]

    def test_create_commit(self, client, gitlab):
        gitlab.respond(201, COMMIT)
        opt = CreateCommitOptions(
            branch="main",
            commit_message="some commit message",
            actions=[
                CommitAction(action=FileAction.CREATE, file_path="foo/bar", content="some content"),
                CommitAction(action=FileAction.MOVE, file_path="foo/baz", previous_path="foo/old"),
                CommitAction(action=FileAction.UPDATE, file_path="img.png", content="aGk=", encoding="base64"),
            ],
            author_name="Example User",
        )
        commit, resp = client.commits.create_commit(5, opt)
        assert gitlab.last.method == "POST"
        assert gitlab.last_path == "projects/5/repository/commits"
        assert gitlab.last_json == {
            "branch": "main",
            "commit_message": "some commit message",
            "actions": [
                {"action": "create", "file_path": "foo/bar", "content": "some content"},
                {"action": "move", "file_path": "foo/baz", "previous_path": "foo/old"},
                {"action": "update", "file_path": "img.png", "content": "aGk=", "encoding": "base64"},
            ],
            "author_name": "Example User",
        }
        assert commit.id == SHA
        assert resp.status == 201

    def test_get_commit_diff(self, client, gitlab):
        gitlab.respond(body=[
            {"diff": "--- a/doc/update/5.4-to-6.0.md\n+++ b/doc/update/5.4-to-6.0.md", "new_path": "doc/update/5.4-to-6.0.md",
             "old_path": "doc/update/5.4-to-6.0.md", "a_mode": None, "b_mode": "100644", "new_file": False},
        ])
        diffs, _ = client.commits.get_commit_diff(5, SHA, ListOptions(page=2))
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/diff"
        assert gitlab.last_query == [("page", "2")]
        assert diffs[0].b_mode == "100644"
        assert diffs[0].a_mode == ""

    def test_get_commit_comments(self, client, gitlab):
        gitlab.respond(body=[{"note": "this code is really nice", "author": {"id": 11, "username": "admin"}}])
        comments, _ = client.commits.get_commit_comments(5, SHA)
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/comments"
        assert comments[0].author.username == "admin"

    def test_post_commit_comment(self, client, gitlab):
        gitlab.respond(201, {"note": "nice", "path": None, "line": None, "line_type": None, "author": {"id": 1}})
        comment, _ = client.commits.post_commit_comment(5, SHA, PostCommitCommentOptions(note="nice"))
        assert gitlab.last.method == "POST"
        assert gitlab.last_json == {"note": "nice", "path": None, "line": None, "line_type": None}
        assert comment.note == "nice"

    def test_post_inline_commit_comment(self, client, gitlab):
        gitlab.respond(201, {"note": "typo", "path": "README.md", "line": 3, "line_type": "new"})
        opt = PostCommitCommentOptions(note="typo", path="README.md", line=3, line_type="new")
        comment, _ = client.commits.post_commit_comment(5, SHA, opt)
        assert gitlab.last_json == {"note": "typo", "path": "README.md", "line": 3, "line_type": "new"}
        assert comment.line == 3


class TestCommitStatuses:
    STATUS = {
        "id": 93,
        "sha": SHA,
        "ref": "main",
        "status": "success",
        "name": "default",
        "target_url": None,
        "description": None,
        "created_at": "2016-01-19T09:05:50.355Z",
        "started_at": None,
        "finished_at": "2016-01-19T09:05:50.365Z",
        "author": {"id": 1, "username": "root", "state": "active"},
    }

    def test_get_commit_statuses(self, client, gitlab):
        gitlab.respond(body=[self.STATUS, {**self.STATUS, "id": 94, "name": "lint"}])
        statuses, _ = client.commits.get_commit_statuses(
            5, SHA, GetCommitStatusesOptions(ref="main", all=True)
        )
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/statuses"
        assert gitlab.last_query == [("ref", "main"), ("all", "true")]
        assert [s.name for s in statuses] == ["default", "lint"]
        assert statuses[0].author.username == "root"
        assert statuses[0].started_at is None

    def test_set_commit_status(self, client, gitlab):
        gitlab.respond(201, self.STATUS)
        opt = SetCommitStatusOptions(state=BuildState.SUCCESS, name="default", target_url="https://ci.example.com/1")
        status, _ = client.commits.set_commit_status("group/project", SHA, opt)
        assert gitlab.last.method == "POST"
        assert gitlab.last_path == f"projects/group%2Fproject/statuses/{SHA}"
        assert gitlab.last_json == {"state": "success", "name": "default", "target_url": "https://ci.example.com/1"}
        assert status.id == 93

    def test_set_commit_status_always_sends_state(self, client, gitlab):
        gitlab.respond(400, {"message": "state is missing"})
        with pytest.raises(ErrorResponse):
            client.commits.set_commit_status(5, SHA, SetCommitStatusOptions(ref="main"))
        assert gitlab.last_json == {"state": None, "ref": "main"}


class TestMergeRequestsAndCherryPick:
    def test_get_merge_requests_by_commit(self, client, gitlab):
        gitlab.respond(body=[{
            "id": 1,
            "iid": 1,
            "project_id": 3,
            "title": "test1",
            "state": "merged",
            "source_branch": "test1",
            "target_branch": "main",
            "author": {"id": 1, "username": "admin"},
            "labels": ["bug"],
            "merged_at": "2018-09-07T11:16:17.520Z",
        }])
        mrs, _ = client.commits.get_merge_requests_by_commit(5, SHA)
        assert gitlab.last.method == "GET"
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/merge_requests"
        assert isinstance(mrs[0], MergeRequest)
        assert mrs[0].labels == ["bug"]
        assert mrs[0].author.username == "admin"

    def test_cherry_pick_commit(self, client, gitlab):
        gitlab.respond(201, COMMIT)
        commit, _ = client.commits.cherry_pick_commit(5, SHA, CherryPickCommitOptions(target_branch="stable"))
        assert gitlab.last.method == "POST"
        assert gitlab.last_path == f"projects/5/repository/commits/{SHA}/cherry_pick"
        assert gitlab.last_json == {"branch": "stable"}
        assert commit.short_id == "ed899a2f4b5"
