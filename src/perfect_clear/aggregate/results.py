from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from ..game import Order


class RunStatus(Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"  # cancellation token tripped
    STOPPED = "stopped"  # early stopping callback asked to stop


@dataclass
class AggregateResult:
    """Tally of an aggregate run.

    ``total`` counts the orders whose search finished. When ``status`` is not
    COMPLETED the counts are partial and ``pattern_size - total`` orders were
    never decided.
    """

    total: int = 0
    feasible: int = 0
    pattern_size: int = 0
    status: RunStatus = RunStatus.COMPLETED
    orders: Optional[Dict[Order, bool]] = None

    @property
    def infeasible(self) -> int:
        return self.total - self.feasible

    @property
    def pending(self) -> int:
        return self.pattern_size - self.total

    @property
    def rate(self) -> float:
        return self.feasible / self.total if self.total else 0.0

    @property
    def completed(self) -> bool:
        return self.status is RunStatus.COMPLETED

    def add(self, order: Order, feasible: bool) -> None:
        self.total += 1
        self.feasible += feasible
        if self.orders is not None:
            self.orders[order] = feasible

    def merge(self, outcome: "ChunkOutcome") -> None:
        for order, feasible in outcome.verdicts:
            self.add(order, feasible)


@dataclass
class ChunkOutcome:
    """Verdicts of one chunk of orders searched by a worker."""

    verdicts: Tuple[Tuple[Order, bool], ...] = field(default_factory=tuple)
    aborted: bool = False
