"""
GitNotes Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → Route Handler

    Request ID runs first so every log line of the request, including the
    access line, can carry the same correlation id.
"""
