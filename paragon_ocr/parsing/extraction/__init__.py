from .amount_parser import AmountParser
from .category_classifier import CategoryClassifier
from .line_corpus import split_lines, first_block_lines
from .line_item_reconstructor import (
    LineItemReconstructor,
    LineItemMatch,
    RejectedLine,
    ItemExtractionResult,
)

__all__ = [
    'AmountParser',
    'CategoryClassifier',
    'split_lines',
    'first_block_lines',
    'LineItemReconstructor',
    'LineItemMatch',
    'RejectedLine',
    'ItemExtractionResult',
]
