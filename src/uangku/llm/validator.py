"""Schema gate between untrusted model output and the trusted ledger."""
import datetime as dt
import re
import threading
import time
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .models import Candidate, TransactionRecord, TransactionType
from uangku.utils.logger import get_logger
from uangku.utils.exceptions import SchemaViolationError

logger = get_logger()

DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d.%m.%y",
    "%d %b %Y",
    "%d %B %Y",
]

# Upper bound for a single transaction amount.
MAX_AMOUNT = Decimal("1e15")


def parse_date(value) -> Optional[dt.date]:
    """Parse a calendar date from common formats, or return None."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # a datetime keeps only its date; any other suffix is not an ISO date
    iso = text[:10] if text[10:11] in ("", "T", " ") else text
    try:
        return dt.date.fromisoformat(iso)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _today(info: ValidationInfo) -> dt.date:
    clock = (info.context or {}).get("today") if info is not None else None
    return clock() if clock else dt.date.today()


class TransactionSchema(BaseModel):
    """Pydantic schema for a candidate transaction with per-field repair rules."""
    model_config = ConfigDict(extra="ignore")

    merchant: str = ""
    amount: Decimal
    date: Optional[dt.date] = None
    category: str = ""
    type: TransactionType
    summary: str = ""

    @field_validator("merchant", "category", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        if value is None or isinstance(value, bool):
            raise ValueError("amount must be a number")
        if isinstance(value, str):
            value = re.sub(r"\s+", "", value)
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"amount {value!r} is not numeric") from e
        if not amount.is_finite():
            raise ValueError("amount must be finite")
        if amount < 0:
            raise ValueError("amount must not be negative")
        if amount > MAX_AMOUNT:
            raise ValueError("amount is too large")
        return amount

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        return TransactionType.parse(value)

    @field_validator("date", mode="before")
    @classmethod
    def _repair_date(cls, value, info: ValidationInfo):
        parsed = parse_date(value)
        if parsed is None:
            parsed = _today(info)
            logger.debug(f"Date {value!r} missing or unparsable, using {parsed.isoformat()}")
        return parsed


class RecordValidator:
    """Turns a Candidate into a TransactionRecord or raises SchemaViolationError."""

    def __init__(self, today: Optional[Callable[[], dt.date]] = None,
                 id_factory: Optional[Callable[[], int]] = None):
        self.today = today or dt.date.today
        self.id_factory = id_factory or MonotonicIdFactory()

    def validate(self, candidate: Candidate) -> TransactionRecord:
        """
        Validate and repair a candidate record.

        Args:
            candidate: Parsed model output

        Returns:
            TransactionRecord with an id assigned here

        Raises:
            SchemaViolationError: If amount or type cannot be repaired
        """
        fields = dict(candidate.fields)
        # an absent date gets the same repair as an unparsable one
        fields.setdefault("date", None)

        try:
            validated = TransactionSchema.model_validate(fields, context={"today": self.today})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc']) or 'record'}: {error['msg']}"
                for error in e.errors()
            )
            logger.warning(f"Rejected candidate record: {problems}")
            raise SchemaViolationError(f"The AI result is not a valid transaction ({problems})") from e

        record = TransactionRecord(
            id=self.id_factory(),
            merchant=validated.merchant,
            amount=validated.amount,
            date=validated.date.isoformat(),
            category=validated.category,
            type=validated.type,
            summary=validated.summary,
        )
        logger.info(
            f"Accepted {record.type.value.lower()} of {record.amount} "
            f"at '{record.merchant}' ({record.category or 'uncategorized'})"
        )
        return record


class MonotonicIdFactory:
    """Millisecond timestamps, bumped so every id is strictly greater than the last."""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            candidate = time.time_ns() // 1_000_000
            self._last = max(candidate, self._last + 1)
            return self._last
