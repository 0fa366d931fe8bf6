"""Tests for insights requester."""
import unittest
from decimal import Decimal
from unittest import mock

from uangku.gemini.gateway import ModelGateway
from uangku.llm.insights import InsightsRequester
from uangku.llm.models import TransactionRecord, TransactionType
from uangku.utils.exceptions import InsightsUnavailableError, ServiceError


def make_records(count):
    # newest first
    return [
        TransactionRecord(
            id=count - i, merchant=f"Store {count - i}", amount=Decimal(1000),
            date="2026-10-19", category="Food", type=TransactionType.EXPENSE, summary=""
        )
        for i in range(count)
    ]


class TestInsightsRequester(unittest.TestCase):
    """Test InsightsRequester functionality."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.gateway = mock.Mock(spec=ModelGateway)
        self.gateway.generate.return_value = "1. Kurangi jajan kopi.\n2. Bagus!\n3. Tabung 10%.\n"
        self.requester = InsightsRequester(self.gateway)
    
    def test_returns_model_text(self):
        """The model text is returned as-is (trimmed)."""
        insights = self.requester.request_insights(make_records(3))
        
        self.assertEqual(insights, "1. Kurangi jajan kopi.\n2. Bagus!\n3. Tabung 10%.")
        self.gateway.generate.assert_called_once()
    
    def test_context_capped_to_most_recent(self):
        """Only the 50 newest records are sent."""
        records = make_records(80)
        
        self.requester.request_insights(records)
        
        prompt = self.gateway.generate.call_args.args[0]
        self.assertIn('"merchant": "Store 80"', prompt)
        self.assertIn('"merchant": "Store 31"', prompt)
        self.assertNotIn('"merchant": "Store 30"', prompt)
    
    def test_empty_collection(self):
        """Nothing to analyze: no gateway call."""
        with self.assertRaises(InsightsUnavailableError):
            self.requester.request_insights([])
        self.gateway.generate.assert_not_called()
    
    def test_gateway_failure(self):
        """Gateway errors surface as InsightsUnavailableError."""
        self.gateway.generate.side_effect = ServiceError("boom")
        
        with self.assertRaises(InsightsUnavailableError):
            self.requester.request_insights(make_records(2))


if __name__ == "__main__":
    unittest.main()
