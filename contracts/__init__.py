"""
Контракты DTO проекта Paragon OCR.

Контракты:
- OCR -> Parsing: RawOCRResult, RawDocumentResult (raw_ocr_schema.py)
- Parsing -> клиент: Receipt (receipt_dto.py, Pydantic v2)
"""

# OCR -> Parsing
from .raw_ocr_schema import (
    RawOCRResult,
    RawDocumentResult,
    TextBlock,
    DocumentEntity,
    EntityProperty,
    OCRMetadata,
)

# Parsing -> клиент
from .receipt_dto import Receipt, ReceiptItem, ReceiptEntityField

__all__ = [
    # OCR -> Parsing
    "RawOCRResult",
    "RawDocumentResult",
    "TextBlock",
    "DocumentEntity",
    "EntityProperty",
    "OCRMetadata",
    # Parsing -> клиент
    "Receipt",
    "ReceiptItem",
    "ReceiptEntityField",
]
