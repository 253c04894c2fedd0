"""Perfect clear feasibility and success-rate search for tetromino fields."""

from .cancel import CancellationToken
from .errors import ConfigurationError, PerfectClearError, PlacementError
from .game import (
    Board,
    MoveGenerator,
    MoveMode,
    MoveRules,
    Orientation,
    PieceType,
    Placement,
    apply,
    is_perfect_clear,
    parse_order,
)
from .patterns import (
    Alternatives,
    Bag,
    Factorial,
    Fixed,
    One,
    Pattern,
    PieceCounter,
    Permutation,
    Wildcard,
)
from .search import PcSearcher, Result, SearchConfig, SearchStatus, is_pc_possible, search
from .aggregate import AggregateResult, Aggregator, RunStatus, pc_success_rate

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "PerfectClearError",
    "PlacementError",
    "Board",
    "MoveGenerator",
    "MoveMode",
    "MoveRules",
    "Orientation",
    "PieceType",
    "Placement",
    "apply",
    "is_perfect_clear",
    "parse_order",
    "Alternatives",
    "Bag",
    "Factorial",
    "Fixed",
    "One",
    "Pattern",
    "PieceCounter",
    "Permutation",
    "Wildcard",
    "PcSearcher",
    "Result",
    "SearchConfig",
    "SearchStatus",
    "is_pc_possible",
    "search",
    "AggregateResult",
    "Aggregator",
    "RunStatus",
    "pc_success_rate",
]
