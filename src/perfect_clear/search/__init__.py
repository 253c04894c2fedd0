"""Perfect clear feasibility search.

- search / is_pc_possible: one board, one order
- PcSearcher: one board, many orders sharing a cache
- SearchConfig: hold and movement rules
- Result / SearchStatus: verdict plus witness placements
"""

from .state import Result, SearchCache, SearchConfig, SearchState, SearchStatus, Witness
from .engine import PcSearcher, is_pc_possible, pc_heights, search, starting_board, validate_query

__all__ = [
    "Result",
    "SearchCache",
    "SearchConfig",
    "SearchState",
    "SearchStatus",
    "Witness",
    "PcSearcher",
    "is_pc_possible",
    "pc_heights",
    "search",
    "starting_board",
    "validate_query",
]
