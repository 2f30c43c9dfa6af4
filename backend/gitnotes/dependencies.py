"""
GitNotes Backend — Service Wiring
===================================

What:  Builds the service graph from Settings and exposes it to routes.
How:   create_app() calls build_note_service() once and keeps the result on
       app.state; route handlers receive it through Depends(get_note_service).
       Tests swap app.state.note_service for one built on fake transports.
"""

import logging

from fastapi import Request

from gitnotes.config import Settings
from gitnotes.services.filter_base import ContentFilter, IdentityContentFilter
from gitnotes.services.gemini_service import GeminiContentFilter
from gitnotes.services.note_service import NoteService
from gitnotes.services.repository_service import GitHubNoteRepository

logger = logging.getLogger(__name__)


def build_content_filter(settings: Settings) -> ContentFilter:
    if not settings.content_filter_enabled:
        logger.info("Content filtering disabled; notes are stored as submitted")
        return IdentityContentFilter()
    return GeminiContentFilter(settings)


def build_note_service(settings: Settings) -> NoteService:
    return NoteService(
        repository=GitHubNoteRepository(settings),
        content_filter=build_content_filter(settings),
    )


def get_note_service(request: Request) -> NoteService:
    """FastAPI dependency returning the NoteService built by create_app()."""
    return request.app.state.note_service
