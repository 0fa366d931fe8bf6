"""Tests for the Gemini gateway."""
import unittest
from unittest import mock

import httpx
from google.genai import errors

from uangku.config.manager import Config
from uangku.gemini.gateway import GeminiGateway
from uangku.llm.models import AttachmentPart, ExtractionRequest
from uangku.utils.exceptions import GatewayTimeout, MissingCredentialsError, ServiceError, Timeout


class TestGeminiGateway(unittest.TestCase):
    """Test GeminiGateway functionality."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.config = Config(gemini_api_key="test_key", model_name="gemini-2.5-flash")
        self.client = mock.MagicMock()
        self.client.models.generate_content.return_value = mock.Mock(text='{"amount": 1}')
        self.gateway = GeminiGateway(self.config, client=self.client)
    
    def test_missing_credentials_short_circuits(self):
        """No key means no client and no call."""
        with mock.patch("uangku.gemini.gateway.genai.Client") as client_cls:
            gateway = GeminiGateway(Config(gemini_api_key=""))
            
            with self.assertRaises(MissingCredentialsError):
                gateway.generate("hello")
            
            client_cls.assert_not_called()
    
    def test_client_created_lazily_with_timeout(self):
        """The SDK client receives the key and a millisecond timeout."""
        with mock.patch("uangku.gemini.gateway.genai.Client") as client_cls:
            client_cls.return_value.models.generate_content.return_value = mock.Mock(text="ok")
            gateway = GeminiGateway(Config(gemini_api_key="k", timeout_seconds=30))
            client_cls.assert_not_called()
            
            self.assertEqual(gateway.generate("hello"), "ok")
            
            kwargs = client_cls.call_args.kwargs
            self.assertEqual(kwargs["api_key"], "k")
            self.assertEqual(kwargs["http_options"].timeout, 30000)
    
    def test_plain_prompt(self):
        """String prompts are sent as a single content part."""
        self.assertEqual(self.gateway.generate("hello"), '{"amount": 1}')
        
        self.client.models.generate_content.assert_called_once_with(
            model="gemini-2.5-flash", contents=["hello"]
        )
    
    def test_request_parts_keep_order(self):
        """Attachments become inline bytes parts in their position."""
        request = ExtractionRequest(parts=("instructions", AttachmentPart(b"img", "image/png"), "text"))
        
        self.gateway.generate(request)
        
        contents = self.client.models.generate_content.call_args.kwargs["contents"]
        self.assertEqual(contents[0], "instructions")
        self.assertEqual(contents[1].inline_data.data, b"img")
        self.assertEqual(contents[1].inline_data.mime_type, "image/png")
        self.assertEqual(contents[2], "text")
    
    def test_timeout(self):
        """Transport timeouts map to GatewayTimeout."""
        self.client.models.generate_content.side_effect = httpx.ReadTimeout("slow")
        
        with self.assertRaises(GatewayTimeout):
            self.gateway.generate("hello")
        self.assertIs(Timeout, GatewayTimeout)
    
    def test_api_error(self):
        """SDK API errors map to ServiceError."""
        self.client.models.generate_content.side_effect = errors.APIError(
            500, {"error": {"message": "boom", "status": "INTERNAL"}}
        )
        
        with self.assertRaises(ServiceError):
            self.gateway.generate("hello")
    
    def test_connection_error(self):
        """Transport errors map to ServiceError."""
        self.client.models.generate_content.side_effect = httpx.ConnectError("down")
        
        with self.assertRaises(ServiceError):
            self.gateway.generate("hello")
    
    def test_deadline_exceeded(self):
        """A 504 from the API is a timeout, not a generic service error."""
        self.client.models.generate_content.side_effect = errors.APIError(
            504, {"error": {"message": "deadline", "status": "DEADLINE_EXCEEDED"}}
        )

        with self.assertRaises(GatewayTimeout):
            self.gateway.generate("hello")

    def test_unexpected_sdk_error(self):
        """Any other SDK failure still surfaces as ServiceError."""
        self.client.models.generate_content.side_effect = ValueError("sdk rejected request")

        with self.assertRaises(ServiceError) as ctx:
            self.gateway.generate("hello")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_empty_response(self):
        """An empty response is a service failure."""
        self.client.models.generate_content.return_value = mock.Mock(text=None)
        
        with self.assertRaises(ServiceError):
            self.gateway.generate("hello")
    
    def test_single_attempt(self):
        """Failures are not retried."""
        self.client.models.generate_content.side_effect = httpx.ConnectError("down")
        
        with self.assertRaises(ServiceError):
            self.gateway.generate("hello")
        self.assertEqual(self.client.models.generate_content.call_count, 1)


if __name__ == "__main__":
    unittest.main()
