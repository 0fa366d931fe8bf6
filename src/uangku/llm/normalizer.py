"""Turns raw user input into a model-ready text/attachment pair."""
import io
import mimetypes
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional

import pypdf
from pypdf.errors import PyPdfError

from .models import AttachmentPart, NormalizedInput, RawInput
from uangku.config.settings import get_settings
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import InvalidInputError, UnreadableAttachmentError

logger = get_logger()


class InputNormalizer:
    """Validates raw input and reads attachments fully into memory."""

    def __init__(self, default_prompt: Optional[str] = None,
                 accepted_media_types: Optional[List[str]] = None):
        settings = get_settings()
        self.default_prompt = default_prompt or settings.default_prompt
        self.accepted_media_types = accepted_media_types or settings.accepted_media_types

    def normalize(self, raw: RawInput) -> NormalizedInput:
        """
        Normalize a RawInput.

        Args:
            raw: Text and/or attachment supplied by the user

        Returns:
            NormalizedInput with non-empty text and an optional AttachmentPart

        Raises:
            InvalidInputError: If both text and attachment are absent
            UnreadableAttachmentError: If the attachment cannot be read
        """
        text = (raw.text or "").strip()
        has_attachment = raw.attachment is not None

        if not text and not has_attachment:
            raise InvalidInputError("Provide a description or attach a receipt")

        attachment = self._read_attachment(raw) if has_attachment else None
        if not text:
            text = self.default_prompt

        if attachment:
            logger.debug(f"Normalized input with {attachment.mime_type} attachment ({attachment.size} bytes)")
        else:
            logger.debug(f"Normalized text input ({len(text)} chars)")
        return NormalizedInput(text=text, attachment=attachment)

    def _read_attachment(self, raw: RawInput) -> AttachmentPart:
        """Read attachment bytes and resolve its media type."""
        source = raw.attachment

        if isinstance(source, AttachmentPart):
            data, mime_type = source.data, raw.mime_type or source.mime_type
        elif isinstance(source, (bytes, bytearray, memoryview)):
            data, mime_type = bytes(source), raw.mime_type
        elif isinstance(source, Path):
            try:
                data = source.read_bytes()
            except OSError as e:
                raise UnreadableAttachmentError(f"Cannot read attachment {source.name}: {e}") from e
            mime_type = raw.mime_type or mimetypes.guess_type(source.name)[0]
        elif hasattr(source, "read"):
            try:
                data = source.read()
            except (OSError, ValueError) as e:
                raise UnreadableAttachmentError(f"Cannot read attachment stream: {e}") from e
            if not isinstance(data, (bytes, bytearray)):
                raise UnreadableAttachmentError("Attachment stream must be opened in binary mode")
            data = bytes(data)
            mime_type = raw.mime_type or getattr(source, "content_type", None)
            if not mime_type and getattr(source, "name", None):
                mime_type = mimetypes.guess_type(str(source.name))[0]
        else:
            raise UnreadableAttachmentError(
                f"Unsupported attachment object: {type(source).__name__}"
            )

        if not data:
            raise UnreadableAttachmentError("Attachment is empty")
        if not mime_type:
            raise UnreadableAttachmentError("Attachment media type is unknown")

        mime_type = mime_type.split(";")[0].strip().lower()
        if not any(fnmatch(mime_type, pattern) for pattern in self.accepted_media_types):
            raise UnreadableAttachmentError(f"Unsupported attachment type: {mime_type}")

        if mime_type == "application/pdf":
            self._check_pdf(data)

        return AttachmentPart(data=data, mime_type=mime_type)

    @staticmethod
    def _check_pdf(data: bytes) -> None:
        """Ensure a PDF attachment opens and has at least one page."""
        try:
            page_count = len(pypdf.PdfReader(io.BytesIO(data)).pages)
        except (PyPdfError, ValueError, OSError) as e:
            raise UnreadableAttachmentError(f"PDF attachment could not be opened: {e}") from e
        if page_count == 0:
            raise UnreadableAttachmentError("PDF attachment has no pages")
