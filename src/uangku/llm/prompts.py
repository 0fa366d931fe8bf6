"""Prompt templates for transaction extraction and financial insights."""
import json
from typing import List, Optional, Sequence

from .models import ExtractionRequest, NormalizedInput, TransactionRecord
from uangku.config.settings import get_settings

EXTRACTION_TEMPLATE = """You are an expert financial assistant AI.
Your task is to analyze the input (which may be a receipt image, a document or a text description) and extract structured financial data.

Return ONLY a valid JSON object (no markdown formatting, no code fencing, no explanations) with the following schema:
{{
  "merchant": "string (name of place/person)",
  "amount": number (numeric value only, no currency symbols or thousands separators),
  "date": "string (YYYY-MM-DD)",
  "category": "string (e.g., {categories})",
  "type": "string (Income or Expense)",
  "summary": "string (brief description of items/service)"
}}

If the input is just a text prompt like "I spent 50k on coffee", parse it accurately (50k means 50000, 50rb means 50000).
If it's an image, perform OCR and extraction.
If data is missing, do not omit the key: make a reasonable guess, or use the current date for date.
"""

INSIGHTS_TEMPLATE = """Anda adalah penasihat keuangan yang bijak. Analisis riwayat transaksi berikut dan berikan {count} wawasan atau rekomendasi keuangan yang singkat, dapat ditindaklanjuti, dan ramah.
Fokus pada kebiasaan belanja, potensi penghematan, atau pujian untuk perilaku atau pencatatan yang baik.
Gunakan {language}.
JANGAN gunakan format markdown seperti bintang (*), bold (**), atau bullet points simbol. Gunakan format paragraf biasa atau penomoran angka sederhana ({numbering}).

Transaksi:
{transactions}
"""


def render_extraction_instructions(categories: Sequence[str]) -> str:
    """Render the fixed output contract for a category suggestion list."""
    return EXTRACTION_TEMPLATE.format(categories=", ".join(categories))


class ExtractionPromptBuilder:
    """Combines the constant instruction block with normalized user input."""

    def __init__(self, categories: Optional[List[str]] = None):
        self.categories = categories or get_settings().suggested_categories
        self.instructions = render_extraction_instructions(self.categories)

    def build(self, normalized: NormalizedInput) -> ExtractionRequest:
        """Order: instructions, attachment (primary evidence), then free text."""
        parts = [self.instructions]
        if normalized.attachment is not None:
            parts.append(normalized.attachment)
        if normalized.text:
            parts.append(normalized.text)
        return ExtractionRequest(parts=tuple(parts))


def build_insights_prompt(records: Sequence[TransactionRecord], language: str,
                          count: int = 3) -> str:
    """Render the summarization prompt over an already-capped record slice."""
    numbering = ", ".join(f"{i}." for i in range(1, count + 1))
    transactions = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
    return INSIGHTS_TEMPLATE.format(
        count=count,
        language=language,
        numbering=numbering,
        transactions=transactions
    )
