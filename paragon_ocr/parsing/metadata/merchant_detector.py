from dataclasses import dataclass
from typing import List, Optional, Sequence, TYPE_CHECKING

from config.settings import MERCHANT_MAX_HEADER_LINES, MERCHANT_FALLBACK_LINE
from ..extraction.line_corpus import first_block_lines

if TYPE_CHECKING:
    from ..locales.config_loader import LocaleConfig


@dataclass
class MerchantResult:
    """Результат определения продавца (догадка низкой уверенности)."""
    name: str
    line_index: Optional[int] = None
    method: str = "none"  # first_line | suffix | fallback_line | none


class MerchantDetector:
    """
    Определяет продавца по первому блоку текста.

    Короткий блок (<= MERCHANT_MAX_HEADER_LINES строк): берется первая строка.
    Длинный блок: ищется строка с маркером юрлица ("sp. z o.o.") среди
    первых MERCHANT_FALLBACK_LINE строк, иначе берется строка номер
    MERCHANT_FALLBACK_LINE как есть.
    """

    # Маркеры юрлица (fallback - если нет locale_config)
    SUFFIXES = ["sp. z o.o.", "sp.z o.o.", "sp. z.o.o.", "s.a.", "sp. j.", "sp. k.", "s.c."]

    def __init__(
        self,
        locale_config: Optional['LocaleConfig'] = None,
        max_header_lines: int = MERCHANT_MAX_HEADER_LINES,
        fallback_line: int = MERCHANT_FALLBACK_LINE
    ):
        if locale_config and locale_config.merchant_suffixes:
            suffixes = locale_config.merchant_suffixes
        else:
            suffixes = self.SUFFIXES
        self.suffixes = [s.lower() for s in suffixes if s]
        self.max_header_lines = max_header_lines
        self.fallback_line = fallback_line

    def detect(self, texts: Sequence[str]) -> MerchantResult:
        """
        Args:
            texts: RecognizedText (блоки OCR), используется только первый блок
        """
        lines = first_block_lines(texts)
        if not lines:
            return MerchantResult(name="")

        if len(lines) <= self.max_header_lines:
            return MerchantResult(name=lines[0], line_index=0, method="first_line")

        index = self._find_suffix_line(lines)
        if index is not None:
            return MerchantResult(name=lines[index], line_index=index, method="suffix")

        index = min(self.fallback_line, len(lines)) - 1
        return MerchantResult(name=lines[index], line_index=index, method="fallback_line")

    def _find_suffix_line(self, lines: List[str]) -> Optional[int]:
        for index, line in enumerate(lines[:self.fallback_line]):
            lower = line.lower()
            if any(suffix in lower for suffix in self.suffixes):
                return index
        return None
