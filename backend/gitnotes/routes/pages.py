"""
GitNotes Backend — Index Page Route
=====================================

What:  GET / serves the single-page UI (create form + list of notes).
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from gitnotes.pages import INDEX_PAGE

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    return HTMLResponse(INDEX_PAGE)
