"""
Parser - сборка Receipt: эвристический режим и entity-режим.
"""

from .trace import AnalysisTrace, ParseResult, TraceStep
from .receipt_parser import ReceiptParser, build_item_reconstructor
from .entity_reducer import EntityReducer

__all__ = [
    "AnalysisTrace",
    "ParseResult",
    "TraceStep",
    "ReceiptParser",
    "build_item_reconstructor",
    "EntityReducer",
]
