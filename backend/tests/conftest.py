"""
GitNotes Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the test suite.
How:   GitHub is replaced by FakeGitHub, an in-memory contents API served
       through httpx.MockTransport; Gemini is replaced by mocks or by the
       identity filter. No test touches the network.

Fixtures:
    ├── test_settings:     Settings with fake secrets and fixed coordinates
    ├── fake_github:       In-memory GitHub contents API + raw file host
    ├── repository:        GitHubNoteRepository wired to fake_github
    ├── mock_repository:   AsyncMock standing in for GitHubNoteRepository
    ├── mock_filter:       AsyncMock ContentFilter (identity by default)
    └── test_client:       HTTPX AsyncClient on an app wired to fake_github
"""

import base64
import json
import os
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

# Set before gitnotes is imported: the module-level app reads the environment
os.environ["GITHUB_TOKEN"] = "test-token-not-real"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gitnotes.config import Settings
from gitnotes.main import create_app
from gitnotes.services.filter_base import ContentFilter, IdentityContentFilter
from gitnotes.services.note_service import NoteService
from gitnotes.services.repository_service import GitHubNoteRepository

OWNER = "octo"
REPO = "notes-test"
RAW_HOST = "raw.githubusercontent.com"


class FakeGitHub:
    """
    In-memory stand-in for the parts of the GitHub API the client uses.

    Serves:
        GET  api.github.com/repos/{o}/{r}/contents/{dir}          listing
        GET  api.github.com/repos/{o}/{r}/contents/{dir}/{name}   file metadata
        PUT  api.github.com/repos/{o}/{r}/contents/{dir}/{name}   create file
        GET  raw.githubusercontent.com/{o}/{r}/{branch}/{path}    raw bytes

    `files` maps repository path → raw bytes. `requests` records every
    request for assertions. Set `fail_with` to force a status on the API host.
    """

    def __init__(self, owner: str = OWNER, repo: str = REPO, branch: str = "main"):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.files: Dict[str, bytes] = {}
        self.extra_entries: list = []
        self.requests: list = []
        self.fail_with: Optional[int] = None

    @property
    def contents_prefix(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/"

    def add_note(self, note_id: str, title: str, content: str) -> None:
        self.files[f"notes/{note_id}.json"] = json.dumps(
            {"title": title, "content": content}
        ).encode("utf-8")

    def entry(self, path: str) -> dict:
        return {
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "type": "file",
            "sha": "0" * 40,
            "download_url": f"https://{RAW_HOST}/{self.owner}/{self.repo}/{self.branch}/{path}",
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == RAW_HOST:
            prefix = f"/{self.owner}/{self.repo}/{self.branch}/"
            path = request.url.path[len(prefix):]
            if path in self.files:
                return httpx.Response(200, content=self.files[path])
            return httpx.Response(404, text="404: Not Found")

        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "Server Error"})

        if not request.url.path.startswith(self.contents_prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        path = request.url.path[len(self.contents_prefix):]

        if request.method == "PUT":
            if path in self.files:
                return httpx.Response(422, json={"message": "\"sha\" wasn't supplied."})
            body = json.loads(request.content)
            self.files[path] = base64.b64decode(body["content"])
            return httpx.Response(
                201,
                json={"content": self.entry(path), "commit": {"message": body["message"]}},
            )

        if request.method == "GET":
            if path in self.files:
                return httpx.Response(200, json=self.entry(path))
            children = [p for p in self.files if p.startswith(path + "/")]
            if children or (self.extra_entries and path == "notes"):
                listing = [self.entry(p) for p in children] + self.extra_entries
                return httpx.Response(200, json=listing)
            return httpx.Response(404, json={"message": "Not Found"})

        return httpx.Response(405)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def test_settings():
    """Settings with fake secrets; filtering on, so Gemini must be mocked."""
    return Settings(
        github_owner=OWNER,
        github_repo=REPO,
        github_token="test-token-not-real",
        gemini_api_key="test-key-not-real",
        user_agent="gitnotes-tests",
        log_level="WARNING",
    )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def repository(test_settings, fake_github):
    return GitHubNoteRepository(test_settings, transport=fake_github.transport())


@pytest.fixture
def mock_repository():
    """
    AsyncMock with the GitHubNoteRepository surface.

    Usage:
        mock_repository.get_note.return_value = NoteBlob(title="t", content="c")
    """
    repo = MagicMock(spec=GitHubNoteRepository)
    repo.list_notes = AsyncMock(return_value=[])
    repo.get_note = AsyncMock(return_value=None)
    repo.put_note = AsyncMock(return_value={})
    return repo


@pytest.fixture
def mock_filter():
    """ContentFilter mock that returns its input unless reconfigured."""
    content_filter = MagicMock(spec=ContentFilter)

    async def identity(text: str) -> str:
        return text

    content_filter.filter_text = AsyncMock(side_effect=identity)
    return content_filter


@pytest.fixture
def app(test_settings, repository):
    """
    Application wired to FakeGitHub with the identity filter.

    Tests that need a different filter replace app.state.note_service.
    """
    application = create_app(test_settings)
    application.state.note_service = NoteService(
        repository=repository,
        content_filter=IdentityContentFilter(),
    )
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_index(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
