from dataclasses import dataclass
from typing import List, Optional, Sequence, TYPE_CHECKING

from .merchant_detector import MerchantDetector, MerchantResult
from .date_extractor import DateExtractor, DateResult
from .total_extractor import TotalExtractor, TotalResult

if TYPE_CHECKING:
    from ..locales.config_loader import LocaleConfig


@dataclass
class MetadataResult:
    """Поля чека, извлеченные независимыми экстракторами."""
    merchant: MerchantResult
    date: DateResult
    total: TotalResult


class MetadataExtractor:
    """
    Оркестратор для извлечения полей чека.

    Каждый экстрактор пишет свое поле, поэтому порядок вызовов
    не важен. Исключение - ярусы итоговой суммы внутри TotalExtractor.
    """

    def __init__(
        self,
        merchant_detector: Optional[MerchantDetector] = None,
        date_extractor: Optional[DateExtractor] = None,
        total_extractor: Optional[TotalExtractor] = None,
        locale_config: Optional['LocaleConfig'] = None
    ):
        self.merchant_detector = merchant_detector or MerchantDetector(locale_config)
        self.date_extractor = date_extractor or DateExtractor(locale_config)
        self.total_extractor = total_extractor or TotalExtractor(locale_config)

    def process(self, texts: Sequence[str], lines: List[str]) -> MetadataResult:
        """
        Args:
            texts: RecognizedText (для продавца нужен первый блок)
            lines: Плоский корпус строк (для даты и суммы)
        """
        return MetadataResult(
            merchant=self.merchant_detector.detect(texts),
            date=self.date_extractor.extract(lines),
            total=self.total_extractor.extract(lines),
        )
