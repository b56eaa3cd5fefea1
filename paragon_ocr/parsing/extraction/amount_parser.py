import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from config.settings import DEFAULT_ITEM_QUANTITY


class AmountParser:
    """Элемент-функция: Нормализует десятичные числа чека (запятая -> точка)."""

    # Денежная сумма: 3,99 / 45.67
    AMOUNT_PATTERN = re.compile(r'\d+[.,]\d{2}')
    # Любое число (целое или дробное) внутри свободного текста
    NUMBER_PATTERN = re.compile(r'\d+(?:[.,]\d+)?')
    # Пробел-разделитель тысяч: "1 234,56"
    THOUSANDS_GAP = re.compile(r'(?<=\d)\s(?=\d{3}(?!\d))')

    def to_decimal(self, raw: Optional[str]) -> Optional[Decimal]:
        """
        ЦКП: Decimal или None.
        Ошибки парсинга не пробрасываются - это просто "нет значения".
        """
        if raw is None:
            return None

        normalized = raw.strip().replace(',', '.')
        if not normalized:
            return None

        try:
            value = Decimal(normalized)
        except (InvalidOperation, ValueError):
            return None

        if not value.is_finite():
            return None
        return value

    def parse(self, text: Optional[str]) -> Optional[Decimal]:
        """Ищет первое число в свободном тексте ("45,67 zł" -> 45.67)."""
        if not text:
            return None

        compact = self.THOUSANDS_GAP.sub('', text)
        match = self.NUMBER_PATTERN.search(compact)
        if not match:
            return None
        return self.to_decimal(match.group(0))

    def parse_standalone(self, line: Optional[str]) -> Optional[Decimal]:
        """Сумма, только если строка состоит ровно из одного числа."""
        if not line:
            return None

        stripped = line.strip()
        if not self.AMOUNT_PATTERN.fullmatch(stripped):
            return None
        return self.to_decimal(stripped)

    def to_quantity(self, raw: Optional[str]) -> int:
        """
        Количество: дробное значение усекается до целого, минимум 1.

        "2" -> 2, "1,5" -> 1, "0,5" -> 1, мусор -> 1
        """
        value = self.to_decimal(raw) if raw else None
        if value is None:
            return DEFAULT_ITEM_QUANTITY

        try:
            quantity = int(value)
        except (ValueError, OverflowError):
            return DEFAULT_ITEM_QUANTITY
        return max(quantity, DEFAULT_ITEM_QUANTITY)
