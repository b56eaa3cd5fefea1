"""
Трасса анализа: диагностика парсинга, возвращаемая вместе с чеком.

Компоненты ядра не пишут в глобальный лог, а складывают решения сюда.
Трасса создается заново на каждый вызов parse/reduce.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from contracts.receipt_dto import Receipt


@dataclass(frozen=True)
class TraceStep:
    """Одно решение парсера."""
    stage: str      # merchant | date | total | items | entities | fallback
    action: str     # found | missing | accepted | rejected | mapped | skipped
    detail: str = ""
    line_index: Optional[int] = None


@dataclass
class AnalysisTrace:
    """Упорядоченный список решений одного прохода."""
    mode: str = "heuristic"  # heuristic | entity
    steps: List[TraceStep] = field(default_factory=list)

    def add(self, stage: str, action: str, detail: str = "", line_index: Optional[int] = None) -> None:
        self.steps.append(TraceStep(stage, action, detail, line_index))

    def by_stage(self, stage: str) -> List[TraceStep]:
        return [step for step in self.steps if step.stage == stage]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "steps": [asdict(step) for step in self.steps],
        }


@dataclass
class ParseResult:
    """ЦКП парсера: чек + трасса анализа."""
    receipt: Receipt
    trace: AnalysisTrace

    def to_dict(self) -> Dict[str, Any]:
        return {
            "receipt": self.receipt.to_dict(),
            "analysis_trace": self.trace.to_dict(),
        }
