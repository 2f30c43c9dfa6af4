"""
GitNotes Backend — Pydantic Schemas
=====================================

What:  Pydantic models for the HTTP contract and for the upstream payloads.
Why:   The GitHub and Gemini payloads are untyped JSON; parsing them into
       explicit records turns a missing field into a PayloadParseError at the
       boundary instead of a None travelling through the service.

Model Inventory:
    API:       Note, NoteCreate, MessageResponse, ErrorResponse
    Storage:   NoteBlob (body of notes/<id>.json), UpstreamFile (contents entry)
    Filter:    FilterResult
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# API Models — What the HTTP surface accepts and returns
# ══════════════════════════════════════════════════════════════════════════


class Note(BaseModel):
    """
    What:  A stored note as returned by GET /notes and POST /notes.
    Why:   The id is carried only in the storage filename; this model joins it
           back with the blob body.
    """
    id: str = Field(description="Note identifier (UUID4, string form)")
    title: str = Field(description="Note title, after filtering")
    content: str = Field(description="Note body, after filtering")


class NoteCreate(BaseModel):
    """
    What:  Body of POST /notes.

    Both fields are optional at the schema level. Presence is checked by
    NoteService, which reports every missing combination with the same
    fixed message.
    """
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body")


class MessageResponse(BaseModel):
    """Client error body, e.g. {"message": "Title and Content are required."}"""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Body of 5xx responses.
    Why:   Upstream details stay in the logs; the client gets a generic message
           and the request id to quote.
    """
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


# ══════════════════════════════════════════════════════════════════════════
# Storage Models — GitHub contents API payloads
# ══════════════════════════════════════════════════════════════════════════


class NoteBlob(BaseModel):
    """
    What:  Body of one persisted note file, {"title": ..., "content": ...}.
    How:   Serialized compactly, base64-encoded and PUT to the contents API;
           parsed back from the file's download_url on reads.
    """
    title: str
    content: str

    def to_note(self, note_id: str) -> Note:
        return Note(id=note_id, title=self.title, content=self.content)


class UpstreamFile(BaseModel):
    """
    One entry of a contents-API response.

    Directory listings return a list of these; a single-file GET returns one.
    Only the fields used by the repository client are modelled.
    """
    name: str
    path: str
    type: str
    download_url: Optional[str] = None

    model_config = {"extra": "ignore"}


# ══════════════════════════════════════════════════════════════════════════
# Filter Models
# ══════════════════════════════════════════════════════════════════════════


class FilterResult(BaseModel):
    """
    What:  Outcome of one content filter call.
    How:   `filtered` is None when the model returned no usable text; `text`
           then falls back to the original input.
    """
    original: str
    filtered: Optional[str] = None

    @property
    def text(self) -> str:
        return self.filtered if self.filtered else self.original
