from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..errors import ConfigurationError
from ..game import Board, MoveRules, Order, PieceType, Placement


Witness = Tuple[Placement, ...]


@dataclass(frozen=True)
class SearchConfig:
    allows_hold: bool = True
    rules: MoveRules = field(default_factory=MoveRules)


class SearchStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Result:
    status: SearchStatus
    witness: Optional[Witness] = None

    @property
    def feasible(self) -> bool:
        return self.status is SearchStatus.SUCCESS

    @property
    def aborted(self) -> bool:
        return self.status is SearchStatus.ABORTED

    def __bool__(self) -> bool:
        return self.feasible


@dataclass(frozen=True)
class SearchState:
    """Unit of memoization.

    ``ceiling`` is the number of rows a piece may still occupy. With hold
    enabled ``hold`` is only empty once every piece has been used.
    """

    board: Board
    ceiling: int
    hold: Optional[PieceType]
    remaining: Order

    @property
    def supply(self) -> int:
        return len(self.remaining) + (self.hold is not None)

    @property
    def free_cells(self) -> int:
        return self.board.width * self.ceiling - self.board.filled_count


class _Failed:
    def __repr__(self) -> str:
        return "FAILED"


FAILED = _Failed()
MISSING = object()

CacheEntry = Union[Witness, _Failed]


class SearchCache:
    """Verdicts of explored states, owned by one query or one aggregate run.

    A successful state maps to the placements that finish it from there; a
    failed state maps to ``FAILED``. Entries are written once and never
    replaced. Verdicts depend on the hold and movement rules, so a cache is
    bound to the first SearchConfig that uses it.
    """

    def __init__(self) -> None:
        self._entries: Dict[SearchState, CacheEntry] = {}
        self.config: Optional[SearchConfig] = None

    def bind(self, config: SearchConfig) -> None:
        if self.config is None:
            self.config = config
        elif self.config != config:
            raise ConfigurationError(f"cache holds verdicts for {self.config}, not {config}")

    def lookup(self, state: SearchState):
        return self._entries.get(state, MISSING)

    def store(self, state: SearchState, entry: CacheEntry) -> CacheEntry:
        return self._entries.setdefault(state, entry)

    def clear(self) -> None:
        self._entries.clear()
        self.config = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, state: object) -> bool:
        return state in self._entries
