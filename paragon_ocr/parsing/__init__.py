"""
Домен Parsing: восстановление структуры чека из текста OCR.

Два режима с общим контрактом (RecognizedText -> Receipt):
- heuristic: ReceiptParser (поля чека + LineItemReconstructor)
- entity: EntityReducer (сущности экстрактора, fallback на реконструкцию товаров)

Вход: contracts.RawOCRResult / contracts.RawDocumentResult
Выход: contracts.Receipt + AnalysisTrace
"""

from .application import ParsingPipeline
from .locales import ConfigLoader, LocaleConfig
from .parser import AnalysisTrace, EntityReducer, ParseResult, ReceiptParser

__all__ = [
    "ParsingPipeline",
    "ConfigLoader",
    "LocaleConfig",
    "AnalysisTrace",
    "EntityReducer",
    "ParseResult",
    "ReceiptParser",
]
