from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..cancel import CancellationToken
from ..errors import ConfigurationError
from ..game import Board, MoveGenerator, Order, PieceType, Placement, apply, format_order, parse_order
from . import pruning
from .state import FAILED, MISSING, Result, SearchCache, SearchConfig, SearchState, SearchStatus, Witness


logger = logging.getLogger(__name__)


class _Aborted(Exception):
    pass


def starting_board(board: Board) -> Tuple[Board, int]:
    """Clear the rows that are already full; return the board and its top ceiling.

    Full rows count towards the perfect clear region, so the ceiling drops by
    one for each of them, as it does for rows cleared during the search.
    """
    start, cleared = board.clear_lines()
    top = board.height - cleared
    if top == 0:
        raise ConfigurationError("every row of the board is already full")
    return start, top


def pc_heights(board: Board, top: int) -> List[int]:
    """Ceilings a perfect clear of ``board`` can use, lowest first.

    A perfect clear fills every free cell below one fixed ceiling (lowered by
    the rows it clears on the way), so only ceilings that cover the stack and
    leave a multiple of four free cells qualify.
    """
    filled = board.filled_count
    return [
        ceiling for ceiling in range(max(1, board.stack_height), top + 1)
        if (board.width * ceiling - filled) % 4 == 0
    ]


def validate_query(board: Board, order_length: int) -> None:
    """Raise ConfigurationError when no search over this board and order length makes sense."""
    if order_length < 1:
        raise ConfigurationError("the order must contain at least one piece")
    start, top = starting_board(board)
    needed = [
        (board.width * ceiling - start.filled_count) // 4
        for ceiling in pc_heights(start, top)
    ]
    if needed and min(needed) > order_length:
        raise ConfigurationError(
            f"a perfect clear needs at least {min(needed)} pieces but the order only has {order_length}"
        )


class PcSearcher:
    """Perfect clear search over one board, reusable across many orders.

    The searcher owns a ``SearchCache`` that lives as long as the searcher,
    so orders sharing a suffix reuse each other's explored states. Use one
    searcher per query or per aggregate run.
    """

    def __init__(self, board: Board, config: Optional[SearchConfig] = None,
                 cache: Optional[SearchCache] = None) -> None:
        self.board = board
        self.config = config or SearchConfig()
        self.cache = cache if cache is not None else SearchCache()
        self.cache.bind(self.config)
        self.generator = MoveGenerator(self.config.rules)
        self._moves: Dict[Tuple[int, int, PieceType], List[Placement]] = {}

    def search(self, order: "str | Iterable[PieceType | str]",
               cancel: Optional[CancellationToken] = None) -> Result:
        order = parse_order(order)
        validate_query(self.board, len(order))
        start, top = starting_board(self.board)

        heights = pc_heights(start, top)
        if not heights:
            logger.debug("no ceiling leaves a multiple of four free cells")
            return Result(SearchStatus.FAILURE)
        try:
            for ceiling in heights:
                root = self._normalize(start, ceiling, None, order)
                if not pruning.admits(root, self.config.allows_hold):
                    logger.debug("order %s rejected below ceiling %d", format_order(order), ceiling)
                    continue
                witness = self._visit(root, cancel)
                if witness is not None:
                    return Result(SearchStatus.SUCCESS, witness)
        except _Aborted:
            return Result(SearchStatus.ABORTED)
        return Result(SearchStatus.FAILURE)

    def _normalize(self, board: Board, ceiling: int, hold: Optional[PieceType], remaining: Order) -> SearchState:
        # With hold, an empty hold slot is equivalent to holding the next piece.
        if self.config.allows_hold and hold is None and remaining:
            hold, remaining = remaining[0], remaining[1:]
        return SearchState(board, ceiling, hold, remaining)

    def _choices(self, state: SearchState) -> Iterator[Tuple[PieceType, Optional[PieceType], Order]]:
        """(piece to place, hold afterwards, queue afterwards) for each legal next piece."""
        remaining = state.remaining
        if not self.config.allows_hold:
            if remaining:
                yield remaining[0], None, remaining[1:]
            return
        if state.hold is None:
            return
        if remaining:
            yield state.hold, remaining[0], remaining[1:]
            if remaining[0] != state.hold:
                yield remaining[0], state.hold, remaining[1:]
        else:
            yield state.hold, None, ()

    def _placements(self, state: SearchState, piece: PieceType) -> List[Placement]:
        key = (state.board.bits, state.ceiling, piece)
        placements = self._moves.get(key)
        if placements is None:
            placements = self._moves[key] = self.generator.generate_minimized(state.board, piece, state.ceiling)
        return placements

    def _visit(self, state: SearchState, cancel: Optional[CancellationToken]) -> Optional[Witness]:
        if cancel is not None and cancel.cancelled:
            raise _Aborted()
        cached = self.cache.lookup(state)
        if cached is not MISSING:
            return None if cached is FAILED else cached
        witness = self._expand(state, cancel)
        self.cache.store(state, FAILED if witness is None else witness)
        return witness

    def _expand(self, state: SearchState, cancel: Optional[CancellationToken]) -> Optional[Witness]:
        for piece, hold, remaining in self._choices(state):
            for placement in self._placements(state, piece):
                board, cleared = apply(state.board, placement)
                if board.is_empty():
                    return (placement,)
                child = self._normalize(board, state.ceiling - cleared, hold, remaining)
                if child.supply == 0 or not pruning.admits(child, self.config.allows_hold):
                    continue
                suffix = self._visit(child, cancel)
                if suffix is not None:
                    return (placement,) + suffix
        return None


def search(board: Board, order: "str | Iterable[PieceType | str]", config: Optional[SearchConfig] = None,
           cancel: Optional[CancellationToken] = None, cache: Optional[SearchCache] = None) -> Result:
    """Decide whether ``order`` can perfect clear ``board``.

    Returns a Result whose status is SUCCESS (with a witness: the placements in
    the order they lock; the first is relative to the board with its full rows
    cleared, each later one to the board left by the previous lock),
    FAILURE, or ABORTED when ``cancel`` was tripped. Raises ConfigurationError
    for ill-formed queries; a PlacementError means the move generator produced
    an invalid placement and is never turned into a FAILURE.
    """
    return PcSearcher(board, config, cache).search(order, cancel)


def is_pc_possible(board: Board, order: "str | Iterable[PieceType | str]",
                   config: Optional[SearchConfig] = None) -> bool:
    return search(board, order, config).feasible
