"""
GitNotes Backend
==================

Short text notes stored as JSON files in a GitHub repository, optionally
rewritten by Google Gemini before they are written.

Layers:
    ┌─────────────────────────────────────┐
    │     Routes (FastAPI, HTTP only)     │  gitnotes.routes
    ├─────────────────────────────────────┤
    │   NoteService (validate/filter/put) │  gitnotes.services.note_service
    ├──────────────────┬──────────────────┤
    │ GitHub contents  │  Content filter  │  repository_service / gemini_service
    └──────────────────┴──────────────────┘
"""

__version__ = "1.0.0"
