"""
GitNotes Backend — Note Service (Business Logic Orchestrator)
===============================================================

What:  Coordinates validate → filter → persist for creation, and the reads.
Why:   Keeps HTTP concerns in the routes and upstream calls in the clients.
How:   Composes a GitHubNoteRepository and a ContentFilter received at
       construction time.
Who:   Called by route handlers through the get_note_service dependency.

Creation Flow (POST /notes):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│ Filter title │───▶│Filter content│───▶│   PUT    │
    │ presence │    │  (filter)    │    │  (filter)    │    │ (GitHub) │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    A failure at any step aborts the request; nothing is written unless both
    filter calls succeeded.
"""

import logging
import uuid
from typing import List

from gitnotes.exceptions import NotFoundError, ValidationError
from gitnotes.schemas.note import Note
from gitnotes.services.filter_base import ContentFilter
from gitnotes.services.repository_service import GitHubNoteRepository

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - create_note(): presence check, filtering, id generation, persistence
        - get_note():    single note lookup, missing note → NotFoundError
        - list_notes():  every stored note, in repository listing order
    """

    def __init__(self, repository: GitHubNoteRepository, content_filter: ContentFilter):
        self.repository = repository
        self.content_filter = content_filter

    async def create_note(self, title: str | None, content: str | None) -> Note:
        """
        Validate, filter and store a new note.

        Args:
            title:   Submitted title; must be a non-empty string
            content: Submitted content; must be a non-empty string

        Returns:
            The stored note with its new id and filtered fields.

        Raises:
            ValidationError:    title or content missing or empty (no write)
            ContentFilterError: filtering failed (no write)
            RepositoryError:    GitHub rejected the write
            ConfigurationError: a required secret is missing
        """
        if not title or not content:
            raise ValidationError(
                context={"has_title": bool(title), "has_content": bool(content)},
            )

        filtered_title = await self.content_filter.filter_text(title)
        filtered_content = await self.content_filter.filter_text(content)

        note_id = str(uuid.uuid4())
        logger.info("Storing note ID: %s", note_id)
        await self.repository.put_note(note_id, filtered_title, filtered_content)

        return Note(id=note_id, title=filtered_title, content=filtered_content)

    async def get_note(self, note_id: str) -> Note:
        """
        Retrieve a single note by id.

        Raises:
            NotFoundError:   GitHub reports no file for this id
            RepositoryError: any other GitHub failure
        """
        blob = await self.repository.get_note(note_id)
        if blob is None:
            raise NotFoundError(resource_id=note_id)
        return blob.to_note(note_id)

    async def list_notes(self) -> List[Note]:
        """Return every stored note. Order follows the repository listing."""
        return await self.repository.list_notes()
