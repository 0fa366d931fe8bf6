"""Extraction orchestration and the transaction ledger."""
from .processor import ExtractionOrchestrator, ExtractionResult, TransactionLedger

__all__ = ["ExtractionOrchestrator", "ExtractionResult", "TransactionLedger"]
