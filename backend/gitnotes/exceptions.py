"""
GitNotes Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios of the service.
Why:   Each kind maps to exactly one response shape; handlers registered in
       main.py do the mapping so services never build HTTP responses.
How:   Every exception carries a message and an optional context dict.
       The message of client-facing errors (400/404) is returned verbatim;
       upstream and configuration errors return a generic message and only
       log their context.

Exception Hierarchy:
    GitNotesError (base)
    ├── ValidationError          → 400 Bad Request, JSON {"message": ...}
    ├── NotFoundError            → 404 Not Found, plain text
    ├── ConfigurationError       → 500 Internal Server Error
    ├── PayloadParseError        → 502 Bad Gateway
    └── UpstreamError            → 502 Bad Gateway
        ├── RepositoryError      (GitHub contents API)
        └── ContentFilterError   (Gemini)
"""

from typing import Any, Dict, Optional


class GitNotesError(Exception):
    """
    Base exception for all GitNotes application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GitNotesError):
    """
    Raised when client input fails validation.

    When:    Note creation without a non-empty title or content.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Title and Content are required.",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GitNotesError):
    """
    Raised when a requested note does not exist in the repository.

    What:    The contents API answered 404 for the note file.
    HTTP:    404 Not Found, body is the plain-text message

    The repository client returns None for a missing file; the service layer
    converts that into this exception so routes stay free of None checks.
    """

    def __init__(
        self,
        resource_id: Optional[str] = None,
        message: str = "Note not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class ConfigurationError(GitNotesError):
    """
    Raised when a required secret is missing.

    When:    Before the first network call of an operation that needs the
             secret (GitHub token on writes, Gemini key on filtering).
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        setting: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["setting"] = setting
        super().__init__(message=f"Missing required setting: {setting}", context=ctx)
        self.setting = setting


class PayloadParseError(GitNotesError):
    """
    Raised when an upstream response body does not have the expected shape.

    When:    A stored note file is not a JSON object with string title/content,
             or a contents-API listing is not a list of file entries.
    HTTP:    502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "Upstream returned a malformed payload",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(GitNotesError):
    """
    Raised when an external API answers with a non-success response.

    Attributes:
        status_code:  Upstream HTTP status, when there was one
    HTTP:    502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "Upstream service error",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class RepositoryError(UpstreamError):
    """GitHub contents API call failed (anything but a recognized 404 on reads)."""


class ContentFilterError(UpstreamError):
    """Gemini call failed; note creation is aborted before any write."""
