"""UangKu: AI-assisted personal finance ledger."""

__version__ = "1.0.0"
