"""
GitNotes Backend — Content Filter Interface
=============================================

What:  Abstract base class for the text transform applied before storage.
Why:   Filtering is optional; NoteService depends on this interface and the
       application factory picks the implementation from settings.
How:   Concrete filters implement filter_text().

Implementations:
    - GeminiContentFilter:   Google Gemini rewrite (CONTENT_FILTER_ENABLED=true)
    - IdentityContentFilter: returns its input (CONTENT_FILTER_ENABLED=false)

Filtering is best-effort. Its output is not validated or escaped and must not
be treated as safe against injection.
"""

from abc import ABC, abstractmethod


class ContentFilter(ABC):
    """
    Contract:
        - filter_text() accepts arbitrary text and returns the text to store
        - When the upstream returns nothing usable, the input is returned as-is
        - Upstream failures are raised as ContentFilterError
        - A missing credential is raised as ConfigurationError before any call
    """

    @abstractmethod
    async def filter_text(self, text: str) -> str:
        """
        Transform one note field before it is persisted.

        Args:
            text: Title or content as submitted by the client.

        Returns:
            The filtered text, or `text` unchanged.

        Raises:
            ContentFilterError: The upstream call failed.
            ConfigurationError: The filter's credential is not configured.
        """
        ...


class IdentityContentFilter(ContentFilter):
    """Pass-through filter used when content filtering is disabled."""

    async def filter_text(self, text: str) -> str:
        return text
