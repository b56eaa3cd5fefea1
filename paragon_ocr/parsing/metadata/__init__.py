"""
Metadata - извлечение полей чека: продавец, дата, итоговая сумма.
"""

from .date_extractor import DateExtractor, DateResult
from .total_extractor import TotalExtractor, TotalResult
from .merchant_detector import MerchantDetector, MerchantResult
from .metadata_extractor import MetadataExtractor, MetadataResult

__all__ = [
    "DateExtractor",
    "DateResult",
    "TotalExtractor",
    "TotalResult",
    "MerchantDetector",
    "MerchantResult",
    "MetadataExtractor",
    "MetadataResult",
]
