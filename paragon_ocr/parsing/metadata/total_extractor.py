import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, TYPE_CHECKING

from config.settings import STANDALONE_TOTAL_MIN
from ..extraction.amount_parser import AmountParser

if TYPE_CHECKING:
    from ..locales.config_loader import LocaleConfig


@dataclass
class TotalResult:
    """Результат извлечения итоговой суммы."""
    amount: Decimal
    text: str = ""
    tier: Optional[int] = None  # 1 - по ключевому слову, 2 - одиночное число
    line_index: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.amount > 0


class TotalExtractor:
    """
    Извлекает итоговую сумму чека в два яруса.

    Tier 1: строка с ключевым словом итога и числом после него.
    Tier 2 (только если Tier 1 ничего не нашел): строка ровно из одного
    числа больше порога (порог отсекает цены отдельных товаров).

    Первое ненулевое значение выигрывает, дальше поиск не идет.
    """

    # Ключевые слова для суммы (fallback, совпадает с pl_PL)
    KEYWORDS = ["suma", "razem", "do zapłaty", "total", "sum"]

    AMOUNT_AFTER_KEYWORD = r"[^\n]*?(?<![\d.,])(\d+[.,]\d{2})(?!\d)"

    def __init__(
        self,
        locale_config: Optional['LocaleConfig'] = None,
        standalone_min: Optional[float] = None,
        amount_parser: Optional[AmountParser] = None
    ):
        """
        Args:
            locale_config: Конфигурация локали (опционально)
            standalone_min: Порог для Tier 2; по умолчанию из локали или settings
            amount_parser: Парсер чисел
        """
        if locale_config and locale_config.total_keywords:
            self.keywords = list(locale_config.total_keywords)
        else:
            self.keywords = list(self.KEYWORDS)

        if standalone_min is None and locale_config is not None:
            standalone_min = locale_config.standalone_total_min
        if standalone_min is None:
            standalone_min = STANDALONE_TOTAL_MIN
        self.standalone_min = Decimal(str(standalone_min))

        self.amount_parser = amount_parser or AmountParser()

        # Длинные ключевые слова первыми: "do zapłaty" раньше "sum"
        alternatives = "|".join(re.escape(kw) for kw in sorted(self.keywords, key=len, reverse=True))
        self._keyword_pattern = re.compile(
            rf"(?:{alternatives}){self.AMOUNT_AFTER_KEYWORD}", re.IGNORECASE
        )

    def extract(self, lines: Sequence[str]) -> TotalResult:
        """
        Ищет итоговую сумму: сначала Tier 1, затем Tier 2.
        """
        result = self.find_keyword_total(lines)
        if result.found:
            return result
        return self.find_standalone_total(lines)

    def find_keyword_total(self, lines: Sequence[str]) -> TotalResult:
        """Tier 1: ключевое слово итога + число."""
        for index, line in enumerate(lines):
            if not line:
                continue
            # "1 234,56": пробел-разделитель тысяч убирается до поиска суммы
            compact = self.amount_parser.THOUSANDS_GAP.sub("", line)
            for m in self._keyword_pattern.finditer(compact):
                amount = self.amount_parser.to_decimal(m.group(1))
                # Ноль не считается найденной суммой - ищем дальше
                if amount is not None and amount > 0:
                    return TotalResult(amount=amount, text=line, tier=1, line_index=index)

        return TotalResult(amount=Decimal("0"))

    def find_standalone_total(self, lines: Sequence[str]) -> TotalResult:
        """Tier 2: строка ровно из одного числа больше порога."""
        for index, line in enumerate(lines):
            amount = self.amount_parser.parse_standalone(line)
            if amount is not None and amount > self.standalone_min:
                return TotalResult(amount=amount, text=line, tier=2, line_index=index)

        return TotalResult(amount=Decimal("0"))
