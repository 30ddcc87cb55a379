"""E2E test fixtures: real GitLab API, no mocks."""

import pytest

from gitlab_rest_client.client import GitLabClient


@pytest.fixture
def live_client():
    with GitLabClient() as client:
        yield client
