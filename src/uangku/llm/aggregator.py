"""Transaction aggregation module."""
from decimal import Decimal
from collections import defaultdict
from typing import Iterable

from .models import TransactionRecord, TransactionType, AggregateSnapshot
from uangku.utils.logger import get_logger

logger = get_logger()


class Aggregator:
    """Computes income/expense totals and expense category buckets."""

    def aggregate(self, transactions: Iterable[TransactionRecord]) -> AggregateSnapshot:
        """
        Aggregate transactions.

        Args:
            transactions: Current transaction collection (not modified)

        Returns:
            AggregateSnapshot; all zeros for an empty collection
        """
        total_income = Decimal(0)
        total_expense = Decimal(0)
        category_totals = defaultdict(Decimal)
        count = 0

        for txn in transactions:
            count += 1
            txn_type = TransactionType.parse(txn.type)
            if txn_type is TransactionType.INCOME:
                total_income += txn.amount
            else:
                total_expense += txn.amount
                category_totals[txn.category] += txn.amount

        logger.debug(
            f"Aggregated {count} transactions into {len(category_totals)} expense categories"
        )

        return AggregateSnapshot(
            total_income=total_income,
            total_expense=total_expense,
            category_totals=dict(category_totals)
        )
