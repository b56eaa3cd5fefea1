"""
Receipt Parser - сборщик чека из распознанного текста (эвристический режим).

Этапы:
1. Корпус строк: блоки OCR -> плоский список строк
2. Поля чека: продавец, дата, итоговая сумма (MetadataExtractor)
3. Товары: LineItemReconstructor + CategoryClassifier
4. Сборка Receipt и трассы анализа

Частичный результат - это нормальный результат: пустой чек
с нулевой суммой возвращается так же, как и полностью разобранный.
"""

from typing import List, Optional, Sequence
from loguru import logger

from config.settings import DEFAULT_LOCALE
from contracts.receipt_dto import Receipt
from ..domain.interfaces import IReceiptParser
from ..extraction.category_classifier import CategoryClassifier
from ..extraction.line_corpus import split_lines
from ..extraction.line_item_reconstructor import ItemExtractionResult, LineItemReconstructor
from ..locales.config_loader import LocaleConfig
from ..metadata.metadata_extractor import MetadataExtractor, MetadataResult
from .trace import AnalysisTrace, ParseResult


class ReceiptParser(IReceiptParser):
    """
    Основной парсер чеков, реализующий интерфейс IReceiptParser.

    Не хранит состояния между вызовами: одинаковый вход дает
    одинаковый чек.
    """

    def __init__(
        self,
        locale_config: Optional[LocaleConfig] = None,
        metadata_extractor: Optional[MetadataExtractor] = None,
        item_reconstructor: Optional[LineItemReconstructor] = None
    ):
        """
        Args:
            locale_config: Конфигурация локали (по умолчанию DEFAULT_LOCALE)
            metadata_extractor: Экстрактор полей чека (опционально)
            item_reconstructor: Реконструктор товаров (опционально)
        """
        self.locale_config = locale_config or LocaleConfig.load(DEFAULT_LOCALE)
        self.metadata_extractor = metadata_extractor or MetadataExtractor(locale_config=self.locale_config)
        self.item_reconstructor = item_reconstructor or build_item_reconstructor(self.locale_config)

    def parse(self, texts: Sequence[str]) -> ParseResult:
        """
        Восстанавливает чек из RecognizedText.

        Args:
            texts: Упорядоченные блоки текста OCR (сверху вниз)

        Returns:
            ParseResult: чек + трасса анализа
        """
        raw_text = [str(t) for t in texts if t is not None]
        trace = AnalysisTrace(mode="heuristic")

        # 1. Корпус строк
        lines = split_lines(raw_text)
        trace.add("corpus", "split", f"{len(raw_text)} blocks -> {len(lines)} lines")

        # 2. Поля чека
        metadata = self.metadata_extractor.process(raw_text, lines)
        self._trace_metadata(metadata, trace)

        # 3. Товары
        extraction = self.item_reconstructor.reconstruct(lines)
        self._trace_items(extraction, trace)

        # 4. Сборка
        receipt = Receipt(
            merchant=metadata.merchant.name,
            date=metadata.date.date,
            total_amount=metadata.total.amount,
            items=extraction.items,
            raw_text=raw_text,
        )

        logger.debug(
            f"[ReceiptParser] merchant='{receipt.merchant}', date='{receipt.date}', "
            f"total={receipt.total_amount}, items={len(receipt.items)}, "
            f"rejected={len(extraction.rejected)}"
        )

        return ParseResult(receipt=receipt, trace=trace)

    def _trace_metadata(self, metadata: MetadataResult, trace: AnalysisTrace) -> None:
        merchant = metadata.merchant
        if merchant.name:
            trace.add("merchant", "found", f"{merchant.method}: '{merchant.name}'", merchant.line_index)
        else:
            trace.add("merchant", "missing")

        date = metadata.date
        if date.found:
            trace.add("date", "found", date.date, date.line_index)
        else:
            trace.add("date", "missing")

        total = metadata.total
        if total.found:
            trace.add("total", "found", f"tier {total.tier}: {total.amount}", total.line_index)
        else:
            trace.add("total", "missing")

    def _trace_items(self, extraction: ItemExtractionResult, trace: AnalysisTrace) -> None:
        for match in extraction.matches:
            detail = f"{match.pattern}: '{match.item.name}' {match.item.price} x{match.item.quantity} [{match.item.category}]"
            if match.name_from_previous_line:
                detail += " (name from previous line)"
            trace.add("items", "accepted", detail, match.line_index)

        for rejected in extraction.rejected:
            trace.add("items", "rejected", f"{rejected.pattern}: {rejected.reason}", rejected.line_index)


def build_item_reconstructor(locale_config: Optional[LocaleConfig]) -> LineItemReconstructor:
    """
    Реконструктор товаров для локали.

    Название товара не должно содержать ни слов итога, ни шумовых слов
    ("paragon", "dziękujemy"). Валюта локали ("PLN", "zł") после цены
    отрезается от названия.
    """
    if locale_config is None:
        return LineItemReconstructor()

    exclude: List[str] = []
    for keyword in list(locale_config.total_keywords) + list(locale_config.skip_keywords):
        if keyword not in exclude:
            exclude.append(keyword)

    return LineItemReconstructor(
        classifier=CategoryClassifier.from_locale(locale_config),
        exclude_keywords=exclude,
        currency_tokens=locale_config.currency_tokens,
    )
