"""
GitNotes Backend — GitHub Repository Client Tests
===================================================

What:  Tests for GitHubNoteRepository against the in-memory FakeGitHub.

What we test:
    ✅ PUT payload: path, base64 body, commit message, branch, headers
    ✅ Missing token fails before any request
    ✅ get_note: found, 404 → None, other failures → RepositoryError
    ✅ list_notes: *.json files only, ids from filenames, one download each
    ✅ Malformed listings and note files → PayloadParseError
    ✅ Ids are percent-encoded into a single path segment
    ✅ UPSTREAM_TIMEOUT reaches every request
"""

import base64
import json

import httpx
import pytest

from gitnotes.config import Settings
from gitnotes.exceptions import ConfigurationError, PayloadParseError, RepositoryError
from gitnotes.services.repository_service import GitHubNoteRepository

NOTE_ID = "0b5f6d2e-8c4a-4a8e-9d8e-3c3c7f1c2a11"


class TestPutNote:

    @pytest.mark.asyncio
    async def test_put_note_request_shape(self, repository, fake_github):
        """PUT goes to notes/<id>.json with a base64 body on the configured branch."""
        await repository.put_note(NOTE_ID, "Hi", "Hello world")

        request = fake_github.requests[-1]
        assert request.method == "PUT"
        assert request.url.path == f"/repos/octo/notes-test/contents/notes/{NOTE_ID}.json"

        body = json.loads(request.content)
        assert body["message"] == f"Add new note: {NOTE_ID}"
        assert body["branch"] == "main"
        decoded = base64.b64decode(body["content"]).decode("utf-8")
        assert decoded == '{"title":"Hi","content":"Hello world"}'

    @pytest.mark.asyncio
    async def test_put_note_headers(self, repository, fake_github):
        """Every call carries token auth, the user agent and the v3 accept header."""
        await repository.put_note(NOTE_ID, "Hi", "Hello world")

        headers = fake_github.requests[-1].headers
        assert headers["Authorization"] == "token test-token-not-real"
        assert headers["User-Agent"] == "gitnotes-tests"
        assert headers["Accept"] == "application/vnd.github.v3+json"

    @pytest.mark.asyncio
    async def test_put_note_non_ascii(self, repository, fake_github):
        """Non-Latin text survives the base64 round trip."""
        await repository.put_note(NOTE_ID, "Grüße", "日本語のメモ")

        stored = json.loads(fake_github.files[f"notes/{NOTE_ID}.json"])
        assert stored == {"title": "Grüße", "content": "日本語のメモ"}

    @pytest.mark.asyncio
    async def test_put_note_without_token_makes_no_request(self, fake_github):
        """A missing token is a configuration error raised before any network call."""
        settings = Settings(github_owner="octo", github_repo="notes-test", github_token="")
        repo = GitHubNoteRepository(settings, transport=fake_github.transport())

        with pytest.raises(ConfigurationError):
            await repo.put_note(NOTE_ID, "Hi", "Hello world")
        assert fake_github.requests == []

    @pytest.mark.asyncio
    async def test_put_note_rejected(self, repository, fake_github):
        """A non-success PUT raises RepositoryError with the status."""
        fake_github.add_note(NOTE_ID, "old", "old")

        with pytest.raises(RepositoryError) as exc_info:
            await repository.put_note(NOTE_ID, "Hi", "Hello world")
        assert exc_info.value.status_code == 422


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get_note_found(self, repository, fake_github):
        fake_github.add_note(NOTE_ID, "Hi", "Hello world")

        blob = await repository.get_note(NOTE_ID)

        assert blob.title == "Hi"
        assert blob.content == "Hello world"
        # metadata lookup, then the raw download
        assert [r.url.host for r in fake_github.requests] == [
            "api.github.com",
            "raw.githubusercontent.com",
        ]

    @pytest.mark.asyncio
    async def test_get_note_missing_returns_none(self, repository):
        assert await repository.get_note("does-not-exist") is None

    @pytest.mark.asyncio
    async def test_get_note_server_error(self, repository, fake_github):
        fake_github.fail_with = 500

        with pytest.raises(RepositoryError) as exc_info:
            await repository.get_note(NOTE_ID)
        assert "Internal Server Error" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_get_note_malformed_blob(self, repository, fake_github):
        fake_github.files[f"notes/{NOTE_ID}.json"] = b'{"title": "only a title"}'

        with pytest.raises(PayloadParseError):
            await repository.get_note(NOTE_ID)

    @pytest.mark.asyncio
    async def test_get_note_not_json(self, repository, fake_github):
        fake_github.files[f"notes/{NOTE_ID}.json"] = b"not json at all"

        with pytest.raises(PayloadParseError):
            await repository.get_note(NOTE_ID)


class TestListNotes:

    @pytest.mark.asyncio
    async def test_list_notes(self, repository, fake_github):
        fake_github.add_note("a", "Title A", "Body A")
        fake_github.add_note("b", "Title B", "Body B")

        notes = await repository.list_notes()

        assert {(n.id, n.title, n.content) for n in notes} == {
            ("a", "Title A", "Body A"),
            ("b", "Title B", "Body B"),
        }

    @pytest.mark.asyncio
    async def test_list_notes_skips_other_entries(self, repository, fake_github):
        """Directories and files without the note suffix are ignored."""
        fake_github.add_note("a", "Title A", "Body A")
        fake_github.extra_entries = [
            {"name": "README.md", "path": "notes/README.md", "type": "file",
             "download_url": "https://raw.githubusercontent.com/octo/notes-test/main/notes/README.md"},
            {"name": "archive", "path": "notes/archive", "type": "dir", "download_url": None},
        ]

        notes = await repository.list_notes()

        assert [n.id for n in notes] == ["a"]
        downloads = [r for r in fake_github.requests if r.url.host == "raw.githubusercontent.com"]
        assert len(downloads) == 1

    @pytest.mark.asyncio
    async def test_list_notes_listing_failure(self, repository):
        """A missing notes directory is a failed listing, not an empty one."""
        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_notes()
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_list_notes_listing_not_a_list(self, test_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"name": "notes", "type": "dir"})

        repo = GitHubNoteRepository(test_settings, transport=httpx.MockTransport(handler))

        with pytest.raises(PayloadParseError):
            await repo.list_notes()

    @pytest.mark.asyncio
    async def test_list_notes_download_failure(self, repository, fake_github):
        fake_github.add_note("a", "Title A", "Body A")
        fake_github.extra_entries = [
            {"name": "gone.json", "path": "notes/gone.json", "type": "file",
             "download_url": "https://raw.githubusercontent.com/octo/notes-test/main/notes/gone.json"},
        ]

        with pytest.raises(RepositoryError):
            await repository.list_notes()


class TestReadHeaders:

    @pytest.mark.asyncio
    async def test_reads_without_token_send_no_authorization(self, fake_github):
        settings = Settings(github_owner="octo", github_repo="notes-test", github_token="")
        repo = GitHubNoteRepository(settings, transport=fake_github.transport())

        await repo.get_note(NOTE_ID)

        assert "Authorization" not in fake_github.requests[-1].headers


class TestNotePathEncoding:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "note_id,encoded",
        [
            ("?", b"%3F.json"),
            ("#", b"%23.json"),
            ("a/b", b"a%2Fb.json"),
        ],
    )
    async def test_reserved_characters_stay_in_the_file_name(
        self, repository, fake_github, note_id, encoded
    ):
        """An id is one path segment upstream, never a query, fragment or subdirectory."""
        assert await repository.get_note(note_id) is None

        request = fake_github.requests[-1]
        assert request.url.raw_path == b"/repos/octo/notes-test/contents/notes/" + encoded
        assert request.url.query == b""

    @pytest.mark.asyncio
    async def test_put_note_encodes_id(self, repository, fake_github):
        await repository.put_note("x?y", "t", "c")

        assert fake_github.requests[-1].url.raw_path.endswith(b"/notes/x%3Fy.json")
        assert "notes/x?y.json" in fake_github.files


class TestUpstreamTimeout:

    @pytest.mark.asyncio
    async def test_timeout_reaches_requests(self, test_settings, fake_github):
        settings = test_settings.model_copy(update={"upstream_timeout": 2.5})
        repo = GitHubNoteRepository(settings, transport=fake_github.transport())

        await repo.get_note(NOTE_ID)

        assert fake_github.requests[-1].extensions["timeout"] == {
            "connect": 2.5, "read": 2.5, "write": 2.5, "pool": 2.5,
        }

    @pytest.mark.asyncio
    async def test_no_timeout_by_default(self, repository, fake_github):
        await repository.get_note(NOTE_ID)

        assert fake_github.requests[-1].extensions["timeout"] == {
            "connect": None, "read": None, "write": None, "pool": None,
        }
