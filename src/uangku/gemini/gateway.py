"""Gemini text generation gateway using the google-genai SDK."""
from typing import List, Optional, Union

import httpx
from google import genai
from google.genai import errors, types

from uangku.config.manager import Config
from uangku.llm.models import AttachmentPart, ExtractionRequest
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import (
    GatewayTimeout,
    MissingCredentialsError,
    ServiceError,
)

logger = get_logger()


class ModelGateway:
    """Given a prompt and optional attachment, return natural-language text."""

    def ensure_ready(self) -> None:
        """Raise a GatewayError if a call could not possibly succeed."""

    def generate(self, request: Union[ExtractionRequest, str]) -> str:
        raise NotImplementedError


class GeminiGateway(ModelGateway):
    """Handles interaction with Gemini API using the Client SDK.

    Single attempt per call. Retrying is left to the caller so a request is
    never silently submitted twice.
    """

    def __init__(self, config: Config, client: Optional[genai.Client] = None):
        self.config = config
        self.model_name = config.model_name
        self._client = client

    def ensure_ready(self) -> None:
        if not self.config.has_credentials:
            logger.error("Gemini API key is missing")
            raise MissingCredentialsError("Gemini API key is missing, set GEMINI_API_KEY")

    @property
    def client(self) -> genai.Client:
        """Create the SDK client on first use, only once a credential is present."""
        if self._client is None:
            self._client = genai.Client(
                api_key=self.config.gemini_api_key,
                http_options=types.HttpOptions(timeout=self.config.timeout_seconds * 1000)
            )
        return self._client

    def generate(self, request: Union[ExtractionRequest, str]) -> str:
        """
        Send a prompt to Gemini.

        Args:
            request: ExtractionRequest parts or a plain prompt string

        Returns:
            Raw response text (untrusted)

        Raises:
            MissingCredentialsError: If no API key is configured (no call is made)
            GatewayTimeout: If the service did not answer in time
            ServiceError: On any other service failure or an empty response
        """
        self.ensure_ready()

        try:
            contents = self._build_contents(request)
            logger.debug(f"Calling {self.model_name} with {len(contents)} content parts")
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=contents
            )
            text = response.text
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.error(f"Gemini request timed out after {self.config.timeout_seconds}s: {e}")
            raise GatewayTimeout("The AI service took too long to answer, please try again") from e
        except errors.APIError as e:
            logger.error(f"Gemini API error {e.code}: {e.message}")
            if e.code == 504 or e.status == "DEADLINE_EXCEEDED":
                raise GatewayTimeout("The AI service took too long to answer, please try again") from e
            raise ServiceError(f"The AI service returned an error ({e.code})") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini transport error: {e}")
            raise ServiceError("Could not reach the AI service") from e
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise ServiceError("The AI service request failed") from e

        if not text:
            logger.error("Gemini returned an empty response")
            raise ServiceError("The AI service returned an empty response")

        return text

    @staticmethod
    def _build_contents(request: Union[ExtractionRequest, str]) -> List[Union[str, types.Part]]:
        """Map request parts to SDK content parts; attachments are sent inline."""
        if isinstance(request, str):
            return [request]

        contents = []
        for part in request.parts:
            if isinstance(part, AttachmentPart):
                contents.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
            else:
                contents.append(part)
        return contents
