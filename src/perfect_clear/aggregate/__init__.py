"""Perfect clear success rates over every order of a pattern."""

from __future__ import annotations

from typing import Optional

from ..cancel import CancellationToken
from ..game import Board
from ..patterns import Pattern
from ..search import SearchConfig
from .aggregator import Aggregator, search_chunk
from .results import AggregateResult, ChunkOutcome, RunStatus


def pc_success_rate(board: Board, pattern: Pattern, config: Optional[SearchConfig] = None,
                    workers: Optional[int] = 1, cancel: Optional[CancellationToken] = None) -> AggregateResult:
    return Aggregator(board, config, workers=workers).run(pattern, cancel=cancel)


__all__ = [
    "Aggregator",
    "AggregateResult",
    "ChunkOutcome",
    "RunStatus",
    "pc_success_rate",
    "search_chunk",
]
