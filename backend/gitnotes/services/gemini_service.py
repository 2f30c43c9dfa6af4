"""
GitNotes Backend — Google Gemini Content Filter
=================================================

What:  Content filter that asks Gemini to rewrite note text before storage.
Why:   Notes are public files in a repository; the rewrite removes abusive
       language and personal data where the model spots it.
How:   Sends a fixed instruction plus the text to generate_content_async and
       takes the response text. No retries, no circuit breaker: a failed call
       aborts the note creation that triggered it.
Who:   Called by NoteService.create_note() for the title, then the content.

Response Handling:
    success with text      → stripped response text
    success without text   → original input unchanged (empty or blocked output)
    any SDK/API exception  → ContentFilterError carrying the upstream message
"""

import logging
import time
import uuid
from typing import Any, Optional

import google.generativeai as genai

from gitnotes.config import Settings
from gitnotes.exceptions import ConfigurationError, ContentFilterError
from gitnotes.schemas.note import FilterResult
from gitnotes.services.filter_base import ContentFilter

logger = logging.getLogger(__name__)


class GeminiContentFilter(ContentFilter):
    """
    Gemini-backed implementation of ContentFilter.

    The model object is created once and reused for every call; it holds no
    per-request state.
    """

    FILTER_PROMPT = """You are a content filter for a public notes board.
Rewrite the text below so that it contains no slurs, no profanity, no threats
and no personal contact data (phone numbers, e-mail or street addresses).

Rules:
1. Keep everything else exactly as written, including line breaks and language
2. Do not summarize, translate, or add commentary
3. If nothing needs to change, return the text unchanged
4. Return ONLY the resulting text

Text:"""

    def __init__(self, settings: Settings):
        self.settings = settings
        if settings.gemini_api_key:
            genai.configure(api_key=settings.gemini_api_key)
        self.model = genai.GenerativeModel(settings.gemini_model)

        logger.info("GeminiContentFilter initialized with model=%s", settings.gemini_model)

    async def filter_text(self, text: str) -> str:
        result = await self.filter(text)
        return result.text

    async def filter(self, text: str) -> FilterResult:
        """
        Run one Gemini call and report both the original and filtered text.

        Raises:
            ConfigurationError: GEMINI_API_KEY is not set
            ContentFilterError: The Gemini call raised
        """
        if not self.settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY")

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        request_options = {}
        if self.settings.upstream_timeout:
            request_options["timeout"] = self.settings.upstream_timeout

        try:
            response = await self.model.generate_content_async(
                [self.FILTER_PROMPT, text],
                request_options=request_options or None,
            )
        except Exception as e:
            logger.error(
                "[%s] Failed to filter content using Gemini: %s",
                request_id,
                str(e),
            )
            raise ContentFilterError(
                message=f"Failed to filter content using Gemini. Response: {e}",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        result = FilterResult(original=text, filtered=self._extract_text(response))

        logger.info(
            "[%s] Gemini filter completed in %.0fms (%d → %d chars%s)",
            request_id,
            duration_ms,
            len(text),
            len(result.text),
            "" if result.filtered else ", no output, kept original",
        )
        return result

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        # .text raises ValueError when the response has no usable candidate
        try:
            text = response.text
        except ValueError:
            return None
        if not text:
            return None
        return text.strip() or None
