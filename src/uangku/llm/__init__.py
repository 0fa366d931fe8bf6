"""LLM extraction and analytics module."""
from .models import (
    TransactionType,
    AttachmentPart,
    RawInput,
    NormalizedInput,
    ExtractionRequest,
    Candidate,
    TransactionRecord,
    AggregateSnapshot
)
from .normalizer import InputNormalizer
from .prompts import ExtractionPromptBuilder
from .sanitizer import ResponseSanitizer
from .validator import RecordValidator
from .aggregator import Aggregator

__all__ = [
    "TransactionType",
    "AttachmentPart",
    "RawInput",
    "NormalizedInput",
    "ExtractionRequest",
    "Candidate",
    "TransactionRecord",
    "AggregateSnapshot",
    "InputNormalizer",
    "ExtractionPromptBuilder",
    "ResponseSanitizer",
    "RecordValidator",
    "Aggregator"
]
