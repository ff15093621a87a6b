"""
Gist Relay — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:      Settings built without .env, with a fake token
    ├── fake_gist_service:  In-memory GistService (no network)
    ├── sample_gist_json:   GitHub's create-gist response body
    └── test_client:        HTTPX AsyncClient wired to an app around the fake
"""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["GITHUB_TOKEN"] = "test-token-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from gist_relay.config import Settings  # noqa: E402
from gist_relay.exceptions import ConfigurationError, NotFoundError  # noqa: E402
from gist_relay.main import create_app  # noqa: E402
from gist_relay.schemas.gist import Gist, GistFile, GistOwner, RawGist  # noqa: E402
from gist_relay.services.gist_base import GistService  # noqa: E402
from gist_relay.services.github_gist_service import (  # noqa: E402
    GIST_DESCRIPTION,
    GIST_FILENAME,
    GIST_OWNER,
)


class FakeGistService(GistService):
    """
    In-memory stand-in for GitHub.

    Gists are kept in `self.gists` (id → content). Every call is recorded so
    tests can assert that validation failures never reach the provider.
    """

    def __init__(self, token: Optional[str] = "test-token-not-real"):
        self.token = token
        self.gists: Dict[str, str] = {}
        self.fetch_calls: List[str] = []
        self.create_calls: List[str] = []
        self.create_error: Optional[Exception] = None
        self.closed = False

    async def fetch_raw(self, gist_id: str) -> RawGist:
        self.fetch_calls.append(gist_id)
        if gist_id not in self.gists:
            raise NotFoundError(resource_id=gist_id, reason="upstream_status")
        return RawGist(
            content=self.gists[gist_id].encode("utf-8"),
            media_type="text/plain; charset=utf-8",
        )

    async def create_gist(self, content: str) -> Gist:
        self.create_calls.append(content)
        if not self.token:
            raise ConfigurationError(message="Sharing notebooks is not configured on this server.")
        if self.create_error is not None:
            raise self.create_error

        gist_id = uuid4().hex
        self.gists[gist_id] = content
        return Gist(
            id=gist_id,
            url=f"https://api.github.com/gists/{gist_id}",
            html_url=f"https://gist.github.com/{gist_id}",
            files={
                GIST_FILENAME: GistFile(
                    filename=GIST_FILENAME,
                    type="text/plain",
                    size=len(content.encode("utf-8")),
                    truncated=False,
                    content=content,
                )
            },
            public=False,
            description=GIST_DESCRIPTION,
            owner=GistOwner(login=GIST_OWNER, id=1),
            created_at=datetime.now(timezone.utc),
            updated_at=datetime.now(timezone.utc),
            comments=0,
        )

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Settings that ignore any developer .env file."""
    return Settings(
        _env_file=None,
        github_token="test-token-not-real",
        log_level="WARNING",
    )


@pytest.fixture
def fake_gist_service() -> FakeGistService:
    return FakeGistService()


@pytest.fixture
def sample_gist_json():
    """
    Trimmed copy of GitHub's 201 response to `POST /gists`.

    Includes fields the relay doesn't model (node_id, forks, history) to
    check they survive the round trip through the Gist schema.
    """
    return {
        "url": "https://api.github.com/gists/aa5a315d61ae9438b18d",
        "forks_url": "https://api.github.com/gists/aa5a315d61ae9438b18d/forks",
        "id": "aa5a315d61ae9438b18d",
        "node_id": "MDQ6R2lzdGFhNWEzMTVkNjFhZTk0MzhiMThk",
        "git_pull_url": "https://gist.github.com/aa5a315d61ae9438b18d.git",
        "git_push_url": "https://gist.github.com/aa5a315d61ae9438b18d.git",
        "html_url": "https://gist.github.com/aa5a315d61ae9438b18d",
        "files": {
            "notebook.percival": {
                "filename": "notebook.percival",
                "type": "text/plain",
                "language": None,
                "raw_url": "https://gist.githubusercontent.com/percival-bot/aa5a315d61ae9438b18d/raw/notebook.percival",
                "size": 5,
                "truncated": False,
                "content": "x = 1",
            }
        },
        "public": False,
        "created_at": "2024-01-15T12:00:00Z",
        "updated_at": "2024-01-15T12:00:00Z",
        "description": "Code shared from a Percival notebook - https://percival.ink",
        "comments": 0,
        "user": None,
        "owner": {
            "login": "percival-bot",
            "id": 1,
            "html_url": "https://github.com/percival-bot",
            "type": "User",
        },
        "forks": [],
        "history": [],
        "truncated": False,
    }


@pytest_asyncio.fixture
async def test_client(test_settings, fake_gist_service):
    """
    HTTPX AsyncClient talking to an app built around the fake service.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(settings=test_settings, gist_service=fake_gist_service)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
