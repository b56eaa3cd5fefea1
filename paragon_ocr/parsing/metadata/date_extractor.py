import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..locales.config_loader import LocaleConfig


@dataclass
class DateResult:
    """Результат извлечения даты."""
    date: str
    text: str = ""
    line_index: Optional[int] = None

    @property
    def found(self) -> bool:
        return bool(self.date)


class DateExtractor:
    """
    Извлекает дату транзакции из текста чека.

    Первое совпадение по всему корпусу выигрывает. Дата возвращается
    как в тексте, календарная корректность не проверяется (месяц 13 допустим).
    """

    # Fallback: YYYY-MM-DD (формат фискальных чеков)
    PATTERNS = [
        r"(?<!\d)\d{4}-\d{2}-\d{2}(?!\d)",
    ]

    def __init__(self, locale_config: Optional['LocaleConfig'] = None):
        if locale_config and locale_config.date_formats:
            self.patterns = self._build_patterns_from_locale(locale_config.date_formats)
        else:
            self.patterns = list(self.PATTERNS)
        self._compiled = [re.compile(p) for p in self.patterns]

    def extract(self, lines: Sequence[str]) -> DateResult:
        """
        Ищет дату построчно, сверху вниз.

        Args:
            lines: Список строк чека
        """
        for index, line in enumerate(lines):
            if not line:
                continue
            for pattern in self._compiled:
                m = pattern.search(line)
                if m:
                    return DateResult(date=m.group(0), text=line, line_index=index)

        return DateResult(date="")

    def _build_patterns_from_locale(self, formats: Sequence[str]) -> List[str]:
        r"""
        Строит regex паттерны из форматов дат из locale_config.

        Пример: "YYYY-MM-DD" → r"(?<!\d)\d{4}\-\d{2}\-\d{2}(?!\d)"
        """
        patterns = []
        for fmt in formats:
            pattern = re.escape(fmt.strip())

            # Заменяем компоненты на regex (YYYY раньше YY)
            pattern = pattern.replace("YYYY", r"\d{4}")
            pattern = pattern.replace("YY", r"\d{2}")
            pattern = pattern.replace("MM", r"\d{2}")
            pattern = pattern.replace("DD", r"\d{2}")

            patterns.append(r"(?<!\d)" + pattern + r"(?!\d)")

        return patterns
