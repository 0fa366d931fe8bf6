"""Data models for the extraction pipeline and ledger analytics."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Tuple, Union


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value: Any) -> "TransactionType":
        """Case-insensitive match against the two permitted literals."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower() if value is not None else ""
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"type must be Income or Expense, got {value!r}")


@dataclass(frozen=True)
class AttachmentPart:
    """Binary attachment read fully into memory."""
    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class RawInput:
    """Unstructured user input: free text, an attachment, or both.

    ``attachment`` may be raw bytes, a binary file-like object, a filesystem
    path, or an already-built ``AttachmentPart``.
    """
    text: Optional[str] = None
    attachment: Optional[Union[bytes, BinaryIO, Path, AttachmentPart]] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], text: Optional[str] = None,
                  mime_type: Optional[str] = None) -> "RawInput":
        return cls(text=text, attachment=Path(path), mime_type=mime_type)


@dataclass(frozen=True)
class NormalizedInput:
    """Model-ready pair produced by the input normalizer."""
    text: str
    attachment: Optional[AttachmentPart] = None


RequestPart = Union[str, AttachmentPart]


@dataclass(frozen=True)
class ExtractionRequest:
    """Ordered content parts: instructions, optional attachment, then user text."""
    parts: Tuple[RequestPart, ...]

    @property
    def instructions(self) -> str:
        return self.parts[0]

    @property
    def attachment(self) -> Optional[AttachmentPart]:
        for part in self.parts[1:]:
            if isinstance(part, AttachmentPart):
                return part
        return None

    @property
    def text(self) -> Optional[str]:
        last = self.parts[-1]
        if len(self.parts) > 1 and isinstance(last, str):
            return last
        return None


@dataclass(frozen=True)
class Candidate:
    """Untrusted object parsed from model output. Only the validator turns it into a record."""
    fields: Dict[str, Any]
    raw_text: str = ""


@dataclass(frozen=True)
class TransactionRecord:
    """Validated transaction. Immutable once created."""
    id: int
    merchant: str
    amount: Decimal
    date: str  # ISO YYYY-MM-DD
    category: str
    type: TransactionType
    summary: str

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def to_dict(self) -> Dict[str, Any]:
        """Serialized form shared by the store and the insights prompt."""
        return {
            "id": self.id,
            "merchant": self.merchant,
            "amount": json_number(self.amount),
            "date": self.date,
            "category": self.category,
            "type": self.type.value,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionRecord":
        return cls(
            id=int(data["id"]),
            merchant=str(data.get("merchant", "")),
            amount=Decimal(str(data["amount"])),
            date=str(data["date"]),
            category=str(data.get("category", "")),
            type=TransactionType.parse(data["type"]),
            summary=str(data.get("summary", "")),
        )


@dataclass(frozen=True)
class AggregateSnapshot:
    """Totals derived from the current transaction collection."""
    total_income: Decimal = Decimal(0)
    total_expense: Decimal = Decimal(0)
    category_totals: Dict[str, Decimal] = field(default_factory=dict)  # expense only

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalIncome": json_number(self.total_income),
            "totalExpense": json_number(self.total_expense),
            "balance": json_number(self.balance),
            "categoryTotals": {
                category: json_number(amount)
                for category, amount in self.category_totals.items()
            },
        }


def json_number(value: Decimal) -> Union[int, float]:
    """Render a Decimal as an int when integral, else a float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
