"""
GitNotes Backend — Services Layer
===================================

What:  Business logic and upstream clients, between routes (HTTP) and GitHub.
How:   Services are built once by the application factory from Settings and
       reach the routes through FastAPI dependencies (gitnotes.dependencies).

Service Inventory:
    - GitHubNoteRepository: note files through the GitHub contents API
    - ContentFilter (abstract): text transform applied before storage
    - GeminiContentFilter: Gemini implementation of ContentFilter
    - IdentityContentFilter: pass-through used when filtering is disabled
    - NoteService: orchestrates validate → filter → persist, and the reads
"""
