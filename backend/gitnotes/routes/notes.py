"""
GitNotes Backend — Notes Route Handlers
=========================================

What:  JSON listing and creation, HTML detail view and plain-text raw view.
How:   Delegates to NoteService; errors propagate to the handlers in main.py.

Response Types:
    GET  /notes            → 200 JSON [{id, title, content}, ...]
    POST /notes            → 201 JSON {id, title, content} | 400 JSON {message}
    GET  /notes/{id}       → 200 text/html | 404 text/plain "Note not found"
    GET  /notes/raw/{id}   → 200 text/plain | 404 text/plain guidance message
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse

from gitnotes.dependencies import get_note_service
from gitnotes.exceptions import NotFoundError
from gitnotes.pages import render_note_page
from gitnotes.schemas.note import ErrorResponse, MessageResponse, Note, NoteCreate
from gitnotes.services.note_service import NoteService

logger = logging.getLogger(__name__)

RAW_NOT_FOUND_MESSAGE = "Raw note not found. Make sure the note ID is correct."

router = APIRouter(tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[Note],
    responses={502: {"description": "GitHub error", "model": ErrorResponse}},
    summary="List all notes",
    description=(
        "Returns every note stored in the repository. One GitHub request is made "
        "per note, so latency grows with the number of notes. Order is not defined."
    ),
)
async def list_notes(
    note_service: NoteService = Depends(get_note_service),
) -> List[Note]:
    return await note_service.list_notes()


@router.post(
    "/notes",
    status_code=201,
    response_model=Note,
    responses={
        400: {"description": "Title or content missing", "model": MessageResponse},
        502: {"description": "Gemini or GitHub error", "model": ErrorResponse},
    },
    summary="Create a note",
    description=(
        "Filters title and content, stores the note as notes/<id>.json and returns "
        "the stored representation."
    ),
)
async def create_note(
    body: NoteCreate,
    note_service: NoteService = Depends(get_note_service),
) -> Note:
    return await note_service.create_note(title=body.title, content=body.content)


@router.get(
    "/notes/raw/{note_id}",
    response_class=PlainTextResponse,
    responses={404: {"description": "Note not found"}},
    summary="Get the raw content of a note",
)
async def get_raw_note(
    note_id: str,
    note_service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    logger.info("Requested raw note ID: %s", note_id)
    try:
        note = await note_service.get_note(note_id)
    except NotFoundError as e:
        raise NotFoundError(resource_id=note_id, message=RAW_NOT_FOUND_MESSAGE) from e
    return PlainTextResponse(note.content)


@router.get(
    "/notes/{note_id}",
    response_class=HTMLResponse,
    responses={404: {"description": "Note not found"}},
    summary="Get a note as an HTML page",
)
async def get_note_page(
    note_id: str,
    note_service: NoteService = Depends(get_note_service),
) -> HTMLResponse:
    # "/notes/raw" without an id is not a note lookup
    if note_id == "raw":
        raise HTTPException(status_code=404)
    note = await note_service.get_note(note_id)
    return HTMLResponse(render_note_page(note))
