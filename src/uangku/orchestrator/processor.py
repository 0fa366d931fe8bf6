"""Extraction pipeline and transaction ledger.

The flow for one submission is Normalizer -> PromptBuilder -> Gateway ->
Sanitizer -> Validator. A failed submission never touches the ledger; an
accepted record is appended newest-first and written through to the store.
Submissions are independent round trips and may complete out of order.
"""
import threading
from dataclasses import dataclass
from typing import List, Optional

from uangku.config.manager import Config
from uangku.gemini.gateway import GeminiGateway, ModelGateway
from uangku.llm.aggregator import Aggregator
from uangku.llm.insights import InsightsRequester
from uangku.llm.models import AggregateSnapshot, RawInput, TransactionRecord
from uangku.llm.normalizer import InputNormalizer
from uangku.llm.prompts import ExtractionPromptBuilder
from uangku.llm.sanitizer import ResponseSanitizer
from uangku.llm.validator import RecordValidator
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import ExtractionError
from uangku.utils.transaction_store import TransactionStore

logger = get_logger()


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one submission: exactly one of record or error is set."""
    record: Optional[TransactionRecord] = None
    error: Optional[ExtractionError] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


class TransactionLedger:
    """Newest-first transaction collection owned by one session."""

    def __init__(self, session_id: str = "default", store: Optional[TransactionStore] = None):
        self.session_id = session_id
        self.store = store
        self._lock = threading.Lock()
        self._records: List[TransactionRecord] = store.load(session_id) if store else []

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> List[TransactionRecord]:
        """Copy of the collection, newest first."""
        with self._lock:
            return list(self._records)

    def append(self, record: TransactionRecord) -> None:
        with self._lock:
            self._records.insert(0, record)
            self._persist()

    def remove(self, record_id: int) -> bool:
        with self._lock:
            remaining = [r for r in self._records if r.id != record_id]
            if len(remaining) == len(self._records):
                return False
            self._records = remaining
            self._persist()
            return True

    def reset(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records = []
            if self.store:
                self.store.clear(self.session_id)
            return removed

    def _persist(self) -> None:
        if self.store:
            self.store.save(self.session_id, list(self._records))


class ExtractionOrchestrator:
    """Explicit commands over the pipeline, the ledger and the insights request."""

    def __init__(
        self,
        config: Config,
        gateway: Optional[ModelGateway] = None,
        ledger: Optional[TransactionLedger] = None,
        validator: Optional[RecordValidator] = None,
    ):
        self.config = config
        self.gateway = gateway or GeminiGateway(config)
        self.ledger = ledger if ledger is not None else TransactionLedger(config.session_id)
        self.normalizer = InputNormalizer()
        self.prompt_builder = ExtractionPromptBuilder()
        self.sanitizer = ResponseSanitizer()
        self.validator = validator or RecordValidator()
        self.aggregator = Aggregator()
        self.insights_requester = InsightsRequester(self.gateway)

    def extract(self, raw: RawInput) -> TransactionRecord:
        """Run the pipeline once. Raises the stage's ExtractionError; no retry."""
        self.gateway.ensure_ready()
        normalized = self.normalizer.normalize(raw)
        request = self.prompt_builder.build(normalized)
        text = self.gateway.generate(request)
        candidate = self.sanitizer.sanitize(text)
        return self.validator.validate(candidate)

    def submit_extraction(self, raw: RawInput) -> ExtractionResult:
        """Run the pipeline and report the outcome without mutating the ledger."""
        try:
            return ExtractionResult(record=self.extract(raw))
        except ExtractionError as e:
            logger.warning(f"Extraction failed ({type(e).__name__}): {e}")
            return ExtractionResult(error=e)

    def append_if_accepted(self, result: ExtractionResult) -> Optional[TransactionRecord]:
        """Append an accepted record to the ledger; failed results are ignored."""
        if not result.accepted:
            return None
        self.ledger.append(result.record)
        logger.info(f"Recorded transaction {result.record.id} ({len(self.ledger)} total)")
        return result.record

    def add_transaction(self, raw: RawInput) -> TransactionRecord:
        """Submit and append in one step, raising the extraction error on failure."""
        result = self.submit_extraction(raw)
        if not result.accepted:
            raise result.error
        return self.append_if_accepted(result)

    def summary(self) -> AggregateSnapshot:
        """Recomputed on every call from the current collection."""
        return self.aggregator.aggregate(self.ledger.snapshot())

    def generate_insights(self) -> str:
        return self.insights_requester.request_insights(self.ledger.snapshot())
