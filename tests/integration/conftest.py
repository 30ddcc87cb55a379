"""Integration fixtures: a real GitLabClient over httpx.MockTransport.

Requests go through the full build/send/decode path; only the network is faked.
"""

import json

import httpx
import pytest

from gitlab_rest_client.client import GitLabClient

BASE_URL = "https://gitlab.example.com/api/v4/"


class FakeGitLab:
    """Records every request and answers with queued responses (default: 200, empty)."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[tuple[int, object, dict]] = []

    def respond(self, status=200, body=None, headers=None):
        self._responses.append((status, body, headers or {}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body, headers = self._responses.pop(0) if self._responses else (200, None, {})
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_path(self) -> str:
        """Raw (still escaped) path of the last request, relative to the API root."""
        return self.last.url.raw_path.split(b"?")[0].decode()[len("/api/v4/"):]

    @property
    def last_query(self) -> list[tuple[str, str]]:
        return list(self.last.url.params.multi_items())

    @property
    def last_json(self):
        return json.loads(self.last.content) if self.last.content else None


@pytest.fixture
def gitlab():
    return FakeGitLab()


@pytest.fixture
def client(gitlab):
    c = GitLabClient(token="test-token", base_url=BASE_URL, transport=httpx.MockTransport(gitlab.handler))
    yield c
    c.close()
