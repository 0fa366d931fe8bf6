"""Tests for transaction aggregator."""
import unittest
from decimal import Decimal

from uangku.llm.models import TransactionRecord, TransactionType
from uangku.llm.aggregator import Aggregator


def make_record(record_id, amount, category, txn_type, merchant="Store"):
    return TransactionRecord(
        id=record_id,
        merchant=merchant,
        amount=Decimal(str(amount)),
        date="2026-10-19",
        category=category,
        type=txn_type,
        summary=""
    )


class TestAggregator(unittest.TestCase):
    """Test Aggregator functionality."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.aggregator = Aggregator()
    
    def test_aggregate_transactions(self):
        """Test income/expense totals and expense-only category buckets."""
        transactions = [
            make_record(4, 5000000, "Salary", TransactionType.INCOME, "Kantor"),
            make_record(3, 50000, "Food", TransactionType.EXPENSE, "McD"),
            make_record(2, 25000, "Food", TransactionType.EXPENSE, "Warteg"),
            make_record(1, 150000, "Transport", TransactionType.EXPENSE, "Pertamina"),
        ]
        
        result = self.aggregator.aggregate(transactions)
        
        self.assertEqual(result.total_income, Decimal("5000000"))
        self.assertEqual(result.total_expense, Decimal("225000"))
        self.assertEqual(result.balance, Decimal("4775000"))
        self.assertEqual(result.category_totals, {
            "Food": Decimal("75000"),
            "Transport": Decimal("150000"),
        })
    
    def test_income_categories_not_bucketed(self):
        """Income records never appear in the category breakdown."""
        result = self.aggregator.aggregate([
            make_record(1, 1000, "Salary", TransactionType.INCOME),
        ])
        
        self.assertEqual(result.category_totals, {})
        self.assertEqual(result.total_expense, 0)
    
    def test_balance_reconciles(self):
        """Balance is always income minus expense."""
        transactions = [
            make_record(3, "10.50", "Food", TransactionType.EXPENSE),
            make_record(2, "100.25", "Business", TransactionType.INCOME),
            make_record(1, "0.75", "Other", TransactionType.EXPENSE),
        ]
        
        result = self.aggregator.aggregate(transactions)
        
        self.assertEqual(result.balance, result.total_income - result.total_expense)
        self.assertEqual(result.balance, Decimal("89.00"))
        self.assertEqual(sum(result.category_totals.values()), result.total_expense)
    
    def test_empty_transactions_yields_zero_snapshot(self):
        """Empty collection gives all-zero sums and no categories."""
        result = self.aggregator.aggregate([])
        
        self.assertEqual(result.total_income, 0)
        self.assertEqual(result.total_expense, 0)
        self.assertEqual(result.balance, 0)
        self.assertEqual(result.category_totals, {})
    
    def test_does_not_mutate_collection(self):
        """Aggregation only reads the collection."""
        transactions = [make_record(1, 10, "Food", TransactionType.EXPENSE)]
        before = list(transactions)
        
        self.aggregator.aggregate(transactions)
        
        self.assertEqual(transactions, before)
    
    def test_snapshot_to_dict(self):
        """Snapshot serializes with integral amounts as ints."""
        result = self.aggregator.aggregate([
            make_record(1, 50000, "Food", TransactionType.EXPENSE),
        ])
        
        self.assertEqual(result.to_dict(), {
            "totalIncome": 0,
            "totalExpense": 50000,
            "balance": -50000,
            "categoryTotals": {"Food": 50000},
        })


if __name__ == "__main__":
    unittest.main()
