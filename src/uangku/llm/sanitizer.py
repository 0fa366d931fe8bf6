"""Cleanup and strict parsing of raw model output."""
import json
import re

from .models import Candidate
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import MalformedResponseError

logger = get_logger()

OPENING_FENCE = re.compile(r"^```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
CLOSING_FENCE = re.compile(r"\r?\n?[ \t]*```$")


class ResponseSanitizer:
    """Strips code fences and parses a single JSON object. No syntax repair."""

    def strip(self, text: str) -> str:
        """Remove surrounding whitespace and leading/trailing code-fence markers."""
        cleaned = (text or "").strip()
        cleaned = OPENING_FENCE.sub("", cleaned, count=1)
        cleaned = CLOSING_FENCE.sub("", cleaned, count=1)
        return cleaned.strip()

    def sanitize(self, text: str) -> Candidate:
        """
        Parse raw model text into a candidate record.

        Raises:
            MalformedResponseError: If the stripped text is not a single JSON object
        """
        cleaned = self.strip(text)
        if not cleaned:
            raise MalformedResponseError("The AI returned an empty response, please try again")

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse model JSON: {e}")
            logger.debug(f"Raw response: {text[:500]}")
            raise MalformedResponseError(
                "The AI response could not be read, please try again"
            ) from e

        if not isinstance(data, dict):
            logger.error(f"Model returned {type(data).__name__} instead of a JSON object")
            logger.debug(f"Raw response: {text[:500]}")
            raise MalformedResponseError("The AI response was not a single record, please try again")

        return Candidate(fields=data, raw_text=text)
