"""
GitNotes Backend — GitHub Repository Client
=============================================

What:  Stores and retrieves notes as JSON files through the GitHub contents API.
Why:   The repository is the only persistence layer; one file per note at
       <notes_dir>/<id>.json on the configured branch.
How:   Each operation opens an httpx.AsyncClient carrying the auth, agent and
       API-version headers, issues its call(s), and closes the client.
Who:   Called by NoteService.

Call Pattern:
    list_notes():  GET contents/<dir>  → GET download_url per *.json entry
    get_note(id):  GET contents/<dir>/<id>.json → GET download_url
    put_note(...): PUT contents/<dir>/<id>.json with base64 body

    Listing fetches run one at a time, in the order the API lists the entries.
    No retries, no caching.
"""

import base64
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from gitnotes.config import Settings
from gitnotes.exceptions import ConfigurationError, PayloadParseError, RepositoryError
from gitnotes.schemas.note import Note, NoteBlob, UpstreamFile

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"

_listing_adapter = TypeAdapter(List[UpstreamFile])


class GitHubNoteRepository:
    """
    Stateless wrapper around the GitHub contents API for note files.

    Args:
        settings:  Repository coordinates, token and user agent.
        transport: Optional httpx transport; tests pass an httpx.MockTransport.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    # ── Paths & Headers ───────────────────────────────────────────────────

    @property
    def contents_path(self) -> str:
        s = self.settings
        return f"/repos/{s.github_owner}/{s.github_repo}/contents/{s.github_notes_dir}"

    def note_path(self, note_id: str) -> str:
        # ids arrive decoded from the route; "?" or "#" must not end the path
        filename = quote(f"{note_id}{self.settings.note_file_suffix}", safe="")
        return f"{self.contents_path}/{filename}"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": GITHUB_ACCEPT,
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.github_token:
            headers["Authorization"] = f"token {self.settings.github_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.github_api_url,
            headers=self._headers(),
            timeout=self.settings.upstream_timeout,
            transport=self._transport,
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def list_notes(self) -> List[Note]:
        """
        Fetch every note in the notes directory.

        Returns:
            Notes in the order the contents API lists the files. The order is
            not guaranteed to be sorted.

        Raises:
            RepositoryError:   Listing or a download answered non-success
            PayloadParseError: Listing or a note file has an unexpected shape
        """
        async with self._client() as client:
            response = await client.get(self.contents_path)
            if not response.is_success:
                raise RepositoryError(
                    message=f"GitHub fetch error: {response.reason_phrase}",
                    status_code=response.status_code,
                    context={"path": self.contents_path},
                )

            entries = self._parse_listing(response)
            notes: List[Note] = []
            for entry in entries:
                if entry.type != "file" or not entry.name.endswith(self.settings.note_file_suffix):
                    continue
                note_id = entry.name[: -len(self.settings.note_file_suffix)]
                blob = await self._download(client, entry)
                notes.append(blob.to_note(note_id))

        logger.info("Listed %d notes from %s", len(notes), self.contents_path)
        return notes

    async def get_note(self, note_id: str) -> Optional[NoteBlob]:
        """
        Fetch one note file.

        Returns:
            The parsed blob, or None when GitHub reports the file absent.

        Raises:
            RepositoryError:   Any non-success other than 404
            PayloadParseError: The file is not a valid note blob
        """
        path = self.note_path(note_id)
        async with self._client() as client:
            response = await client.get(path)
            if response.status_code == 404:
                logger.info("Note %s not found in repository", note_id)
                return None
            if not response.is_success:
                raise RepositoryError(
                    message=f"GitHub fetch error: {response.reason_phrase}",
                    status_code=response.status_code,
                    context={"path": path},
                )

            entry = self._parse_model(response, UpstreamFile)
            return await self._download(client, entry)

    async def put_note(self, note_id: str, title: str, content: str) -> Dict[str, Any]:
        """
        Create notes/<id>.json on the configured branch.

        Returns:
            The contents API response body (commit and content metadata).

        Raises:
            ConfigurationError: No GitHub token configured (no request is made)
            RepositoryError:    The PUT answered non-success
        """
        if not self.settings.github_token:
            raise ConfigurationError("GITHUB_TOKEN")

        blob = NoteBlob(title=title, content=content)
        serialized = json.dumps(blob.model_dump(), separators=(",", ":"))
        payload = {
            "message": f"Add new note: {note_id}",
            "content": base64.b64encode(serialized.encode("utf-8")).decode("ascii"),
            "branch": self.settings.github_branch,
        }

        path = self.note_path(note_id)
        async with self._client() as client:
            response = await client.put(path, json=payload)

        if not response.is_success:
            logger.error(
                "GitHub rejected note %s: %d %s",
                note_id,
                response.status_code,
                response.text,
            )
            raise RepositoryError(
                message=f"GitHub API error: {response.reason_phrase}",
                status_code=response.status_code,
                context={"path": path},
            )

        logger.info("Stored note %s at %s", note_id, path)
        return response.json()

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _download(self, client: httpx.AsyncClient, entry: UpstreamFile) -> NoteBlob:
        if not entry.download_url:
            raise PayloadParseError(
                message="Contents entry has no download_url",
                context={"path": entry.path},
            )
        response = await client.get(entry.download_url)
        if not response.is_success:
            raise RepositoryError(
                message=f"GitHub download error: {response.reason_phrase}",
                status_code=response.status_code,
                context={"path": entry.path},
            )
        try:
            return NoteBlob.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise PayloadParseError(
                message="Stored note is not a valid note file",
                context={"path": entry.path, "errors": e.error_count()},
            ) from e

    @staticmethod
    def _parse_listing(response: httpx.Response) -> List[UpstreamFile]:
        try:
            return _listing_adapter.validate_json(response.content)
        except PydanticValidationError as e:
            raise PayloadParseError(
                message="Contents listing is not a list of entries",
                context={"errors": e.error_count()},
            ) from e

    @staticmethod
    def _parse_model(response: httpx.Response, model):
        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise PayloadParseError(
                message=f"Unexpected {model.__name__} payload",
                context={"errors": e.error_count()},
            ) from e
