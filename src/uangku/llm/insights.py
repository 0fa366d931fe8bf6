"""Natural-language financial insights over recent transactions."""
from typing import Optional, Sequence

from .models import TransactionRecord
from .prompts import build_insights_prompt
from uangku.config.settings import get_settings
from uangku.gemini.gateway import ModelGateway
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import GatewayError, InsightsUnavailableError

logger = get_logger()


class InsightsRequester:
    """Summarizes a bounded, newest-first slice of the collection via the gateway."""

    def __init__(self, gateway: ModelGateway, max_transactions: Optional[int] = None,
                 language: Optional[str] = None, insight_count: Optional[int] = None):
        settings = get_settings()
        self.gateway = gateway
        self.max_transactions = max_transactions or settings.insights_max_transactions
        self.language = language or settings.insights_language
        self.insight_count = insight_count or settings.insights_count

    def request_insights(self, transactions: Sequence[TransactionRecord]) -> str:
        """
        Generate insights text.

        Args:
            transactions: Collection snapshot, newest first

        Returns:
            Plain-text advice from the model

        Raises:
            InsightsUnavailableError: If there is nothing to analyze or the gateway fails
        """
        recent = list(transactions[:self.max_transactions])
        if not recent:
            raise InsightsUnavailableError("Add transactions to unlock AI insights")

        prompt = build_insights_prompt(recent, self.language, self.insight_count)
        logger.info(f"Requesting insights over {len(recent)} of {len(transactions)} transactions")

        try:
            insights = self.gateway.generate(prompt)
        except GatewayError as e:
            logger.error(f"Insights generation failed: {e}")
            raise InsightsUnavailableError(f"Failed to generate insights: {e}") from e

        return insights.strip()
