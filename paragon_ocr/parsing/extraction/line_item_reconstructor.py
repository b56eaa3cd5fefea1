"""
Line Item Reconstructor - восстановление товаров из строк чека.

ЦКП: Список товаров (название, цена, количество, категория) в порядке
обнаружения.

Каждая строка проверяется тремя паттернами в фиксированном порядке,
первый совпавший паттерн выигрывает для этой строки:

1. decimal_qty:         "0,5 x 9,98 4,99A"  (дробное количество)
2. integer_qty:         "1 x3,99 3,99C"     (целое количество, ASCII x)
3. multiplication_sign: "2 ×2,49 4,98C"     (целое количество, знак ×)

Цена товара - итог позиции (последнее число), после него допускаются
обозначение валюты и буква налоговой группы. Название - остаток строки
без токенов количества/цены, а если остаток пуст - предыдущая строка.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from contracts.receipt_dto import ReceiptItem
from .amount_parser import AmountParser
from .category_classifier import CategoryClassifier

_AMOUNT = r"\d+[.,]\d{2}"
# Буква после итога позиции: налоговая группа / валютный маркер ("3,99C")
_MARKER = r"(?:\s?(?P<marker>[A-Za-z])(?![^\W\d_]))?"
# Валюта после итога позиции ("3,99 zł", "3,99 PLN") в название не попадает
DEFAULT_CURRENCY_TOKENS = ("PLN", "zł")


@dataclass(frozen=True)
class ItemPattern:
    """Паттерн товарной строки."""
    name: str
    regex: re.Pattern


def _tail(currency_tokens: Sequence[str]) -> str:
    currency = ""
    tokens = [t for t in currency_tokens if t]
    if tokens:
        alternatives = "|".join(re.escape(t) for t in sorted(tokens, key=len, reverse=True))
        currency = rf"(?:\s*(?i:{alternatives})(?!\w))?"
    return rf"\s*(?P<unit>{_AMOUNT})\s+(?P<total>{_AMOUNT})(?![\d.,]){currency}{_MARKER}"


def build_patterns(currency_tokens: Sequence[str] = DEFAULT_CURRENCY_TOKENS) -> Tuple[ItemPattern, ...]:
    """Паттерны товарной строки в порядке приоритета."""
    tail = _tail(currency_tokens)
    return (
        ItemPattern(
            "decimal_qty",
            re.compile(rf"(?<![\d.,])(?P<qty>\d+[.,]\d+)\s*[xX×]{tail}"),
        ),
        ItemPattern(
            "integer_qty",
            re.compile(rf"(?<![\d.,])(?P<qty>\d+)\s*[xX]{tail}"),
        ),
        ItemPattern(
            "multiplication_sign",
            re.compile(rf"(?<![\d.,])(?P<qty>\d+)\s*×{tail}"),
        ),
    )


@dataclass(frozen=True)
class LineItemMatch:
    """Принятый товар и его происхождение."""
    item: ReceiptItem
    line_index: int
    pattern: str
    name_from_previous_line: bool = False


@dataclass(frozen=True)
class RejectedLine:
    """Строка, совпавшая с паттерном, но отброшенная."""
    line_index: int
    pattern: str
    reason: str


@dataclass
class ItemExtractionResult:
    """Результат восстановления товаров."""
    matches: List[LineItemMatch] = field(default_factory=list)
    rejected: List[RejectedLine] = field(default_factory=list)

    @property
    def items(self) -> List[ReceiptItem]:
        return [m.item for m in self.matches]


class LineItemReconstructor:
    """
    Восстанавливает товары из неструктурированных строк.

    Глобального лимита на количество товаров нет, каждая строка
    рассматривается независимо.
    """

    PATTERNS: Tuple[ItemPattern, ...] = build_patterns()

    def __init__(
        self,
        classifier: Optional[CategoryClassifier] = None,
        exclude_keywords: Optional[Sequence[str]] = None,
        amount_parser: Optional[AmountParser] = None,
        currency_tokens: Optional[Sequence[str]] = None
    ):
        """
        Args:
            classifier: Классификатор категорий
            exclude_keywords: Слова итога/шума - товар с таким названием отбрасывается
            amount_parser: Парсер чисел
            currency_tokens: Обозначения валюты после итога позиции (по умолчанию PLN, zł)
        """
        # Импортируем здесь, чтобы избежать циклических импортов
        from ..metadata.total_extractor import TotalExtractor

        self.classifier = classifier or CategoryClassifier()
        keywords = exclude_keywords if exclude_keywords is not None else TotalExtractor.KEYWORDS
        self.exclude_keywords = [kw.lower() for kw in keywords if kw]
        self.amount_parser = amount_parser or AmountParser()
        self.patterns = self.PATTERNS if currency_tokens is None else build_patterns(currency_tokens)

    def reconstruct(self, lines: Sequence[str]) -> ItemExtractionResult:
        """
        Проходит по всем строкам и собирает товары.

        Args:
            lines: Плоский список строк в порядке чтения
        """
        result = ItemExtractionResult()

        for index, line in enumerate(lines):
            if not line:
                continue

            for pattern in self.patterns:
                match = pattern.regex.search(line)
                if not match:
                    continue

                item, from_previous, reason = self._build_item(lines, index, match)
                if item is not None:
                    result.matches.append(LineItemMatch(item, index, pattern.name, from_previous))
                else:
                    result.rejected.append(RejectedLine(index, pattern.name, reason))
                # Паттерны взаимоисключающие в рамках строки
                break

        return result

    def _build_item(self, lines: Sequence[str], index: int, match: re.Match):
        """Возвращает (товар или None, название из предыдущей строки, причина отказа)."""
        line = lines[index]
        remainder = (line[:match.start()] + " " + line[match.end():]).strip()

        from_previous = False
        if remainder:
            name = re.sub(r"\s+", " ", remainder)
        elif index > 0:
            name = (lines[index - 1] or "").strip()
            from_previous = True
        else:
            name = ""

        if not name:
            return None, from_previous, "empty name"

        lower_name = name.lower()
        if any(kw in lower_name for kw in self.exclude_keywords):
            return None, from_previous, f"excluded name '{name}'"

        price = self.amount_parser.to_decimal(match.group("total"))
        if price is None or price < Decimal("0"):
            return None, from_previous, f"bad price '{match.group('total')}'"

        # Дробное количество усекается до целого, минимум 1
        quantity = self.amount_parser.to_quantity(match.group("qty"))

        try:
            item = ReceiptItem(
                name=name,
                price=price,
                quantity=quantity,
                category=self.classifier.classify(name),
            )
        except ValidationError as e:
            return None, from_previous, f"invalid item: {e.errors()[0].get('msg', 'validation error')}"

        return item, from_previous, ""
