"""
Entity Reducer - сборка чека из сущностей структурного экстрактора.

Сущности уже классифицированы внешним сервисом, поэтому здесь только
таблица соответствий "тип сущности -> поле чека". Если экстрактор не
вернул ни одного товара, а клиент указал, что это магазинный чек,
товары восстанавливаются из текста документа эвристикой
LineItemReconstructor, а итоговая сумма (если ее нет) - по Tier 2.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from loguru import logger

from config.settings import DEFAULT_LOCALE, SHOP_RECEIPT_PHRASE
from contracts.raw_ocr_schema import DocumentEntity
from contracts.receipt_dto import Receipt, ReceiptEntityField, ReceiptItem
from ..domain.interfaces import IEntityReducer
from ..extraction.amount_parser import AmountParser
from ..extraction.category_classifier import CategoryClassifier
from ..extraction.line_corpus import split_lines
from ..extraction.line_item_reconstructor import LineItemReconstructor
from ..locales.config_loader import LocaleConfig
from ..metadata.total_extractor import TotalExtractor
from .receipt_parser import build_item_reconstructor
from .trace import AnalysisTrace, ParseResult


class EntityReducer(IEntityReducer):
    """
    Сворачивает список сущностей в Receipt.

    Нераспознанные типы сущностей попадают только в fields.
    """

    # Тип сущности -> поле чека (включая алиасы expense-парсеров)
    FIELD_MAP: Dict[str, str] = {
        "receipt_merchant_name": "merchant",
        "supplier_name": "merchant",
        "receipt_date": "date",
        "transaction_date": "date",
        "receipt_total_amount": "total_amount",
        "total_amount": "total_amount",
    }

    LINE_ITEM_TYPES = ("line_item", "expense_line_item")

    # Под-свойства составной сущности line_item
    PROP_DESCRIPTION = ("line_item/description", "description")
    PROP_QUANTITY = ("line_item/quantity", "quantity")
    PROP_PRICE = ("line_item/price", "unit_price")
    PROP_TOTAL_PRICE = ("line_item/total_price", "line_item/amount", "amount")

    def __init__(
        self,
        locale_config: Optional[LocaleConfig] = None,
        item_reconstructor: Optional[LineItemReconstructor] = None,
        total_extractor: Optional[TotalExtractor] = None,
        classifier: Optional[CategoryClassifier] = None,
        shop_receipt_phrase: str = SHOP_RECEIPT_PHRASE
    ):
        self.locale_config = locale_config or LocaleConfig.load(DEFAULT_LOCALE)
        self.item_reconstructor = item_reconstructor or build_item_reconstructor(self.locale_config)
        self.total_extractor = total_extractor or TotalExtractor(self.locale_config)
        self.classifier = classifier or CategoryClassifier.from_locale(self.locale_config)
        self.shop_receipt_phrase = shop_receipt_phrase.lower()
        self.amount_parser = AmountParser()

    def is_shop_receipt(self, instructions: Optional[str]) -> bool:
        """Инструкция клиента содержит фразу "shop receipt" (без учета регистра)."""
        return bool(instructions) and self.shop_receipt_phrase in instructions.lower()

    def reduce(
        self,
        entities: List[DocumentEntity],
        raw_text: Sequence[str],
        instructions: str = ""
    ) -> ParseResult:
        """
        Args:
            entities: Сущности в порядке выдачи экстрактора
            raw_text: Текст документа (RecognizedText)
            instructions: Свободная инструкция клиента

        Returns:
            ParseResult: чек + трасса анализа
        """
        raw_text = [str(t) for t in raw_text if t is not None]
        trace = AnalysisTrace(mode="entity")

        values = {"merchant": "", "date": "", "total_amount": Decimal("0")}
        items: List[ReceiptItem] = []
        fields: List[ReceiptEntityField] = []

        for entity in entities:
            fields.append(self._to_field(entity))

            target = self.FIELD_MAP.get(entity.type)
            if target == "total_amount":
                self._map_total(entity, values, trace)
            elif target:
                self._map_text(target, entity, values, trace)
            elif entity.type in self.LINE_ITEM_TYPES:
                item = self._to_item(entity)
                if item is not None:
                    items.append(item)
                    trace.add("entities", "mapped", f"{entity.type}: '{item.name}' {item.price} x{item.quantity}")
                else:
                    trace.add("entities", "skipped", f"{entity.type} without description")
            else:
                trace.add("entities", "skipped", f"unrecognized type '{entity.type}'")

        if not items and self.is_shop_receipt(instructions) and raw_text:
            items = self._fallback(raw_text, values, trace)

        receipt = Receipt(
            merchant=values["merchant"],
            date=values["date"],
            total_amount=values["total_amount"],
            items=items,
            raw_text=raw_text,
            fields=fields,
        )

        logger.debug(
            f"[EntityReducer] entities={len(entities)}, merchant='{receipt.merchant}', "
            f"total={receipt.total_amount}, items={len(receipt.items)}"
        )

        return ParseResult(receipt=receipt, trace=trace)

    def _map_text(self, target: str, entity: DocumentEntity, values: dict, trace: AnalysisTrace) -> None:
        text = entity.mention_text.strip()
        if not text:
            trace.add("entities", "skipped", f"{entity.type} is empty")
        elif values[target]:
            trace.add("entities", "skipped", f"{entity.type}: '{target}' already set")
        else:
            values[target] = text
            trace.add("entities", "mapped", f"{entity.type} -> {target}: '{text}'")

    def _map_total(self, entity: DocumentEntity, values: dict, trace: AnalysisTrace) -> None:
        # Ненулевая сумма не перезаписывается
        if values["total_amount"] > 0:
            trace.add("entities", "skipped", f"{entity.type}: total already set")
            return

        amount = self.amount_parser.parse(entity.mention_text)
        if amount is None or amount <= 0:
            trace.add("entities", "skipped", f"{entity.type}: unparseable '{entity.mention_text}'")
            return

        values["total_amount"] = amount
        trace.add("entities", "mapped", f"{entity.type} -> total_amount: {amount}")

    def _to_item(self, entity: DocumentEntity) -> Optional[ReceiptItem]:
        description = self._first_property(entity, self.PROP_DESCRIPTION).strip()
        if not description:
            return None

        # Итог позиции приоритетнее цены за единицу
        price = self.amount_parser.parse(self._first_property(entity, self.PROP_TOTAL_PRICE))
        if price is None:
            price = self.amount_parser.parse(self._first_property(entity, self.PROP_PRICE))
        if price is None or price < 0:
            price = Decimal("0")

        quantity = self.amount_parser.parse(self._first_property(entity, self.PROP_QUANTITY))

        return ReceiptItem(
            name=description,
            price=price,
            quantity=self.amount_parser.to_quantity(str(quantity) if quantity is not None else None),
            category=self.classifier.classify(description),
        )

    def _fallback(self, raw_text: List[str], values: dict, trace: AnalysisTrace) -> List[ReceiptItem]:
        """Восстановление товаров из текста документа."""
        lines = split_lines(raw_text)
        extraction = self.item_reconstructor.reconstruct(lines)
        trace.add("fallback", "items", f"{len(extraction.matches)} items from {len(lines)} lines")

        for match in extraction.matches:
            trace.add("fallback", "accepted", f"{match.pattern}: '{match.item.name}'", match.line_index)
        for rejected in extraction.rejected:
            trace.add("fallback", "rejected", f"{rejected.pattern}: {rejected.reason}", rejected.line_index)

        if values["total_amount"] <= 0:
            total = self.total_extractor.find_standalone_total(lines)
            if total.found:
                values["total_amount"] = total.amount
                trace.add("fallback", "total", f"tier 2: {total.amount}", total.line_index)

        return extraction.items

    @staticmethod
    def _first_property(entity: DocumentEntity, names: Sequence[str]) -> str:
        for name in names:
            text = entity.property_text(name)
            if text:
                return text
        return ""

    @staticmethod
    def _to_field(entity: DocumentEntity) -> ReceiptEntityField:
        confidence = min(max(float(entity.confidence or 0.0), 0.0), 1.0)
        return ReceiptEntityField(name=entity.type, confidence=confidence, value=entity.mention_text)
