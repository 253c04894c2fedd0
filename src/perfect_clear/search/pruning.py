"""Necessary conditions for a perfect clear below the current ceiling.

Every check here only rejects states from which no perfect clear exists, so
applying them never changes a verdict. All of them rely on the same fact: a
piece fills exactly four free cells below the ceiling, and a cleared row holds
no free cells, so the free cells shrink by four per placed piece until none
are left.
"""

from __future__ import annotations

from functools import lru_cache
from typing import FrozenSet, List, Sequence, Set

from ..game import PieceType
from .state import SearchState


# Cells a piece can put on even columns, over all of its orientations and columns.
EVEN_COLUMN_SPLITS = {
    PieceType.T: (1, 2, 3),
    PieceType.I: (0, 2, 4),
    PieceType.J: (1, 3),
    PieceType.L: (1, 3),
    PieceType.O: (2,),
    PieceType.S: (2,),
    PieceType.Z: (2,),
}


@lru_cache(maxsize=None)
def column_mask(width: int, height: int, first: int, last: int) -> int:
    """Bits of columns ``first..last`` (inclusive) over ``height`` rows."""
    row = ((1 << (last - first + 1)) - 1) << first
    mask = 0
    for y in range(height):
        mask |= row << (y * width)
    return mask


@lru_cache(maxsize=None)
def _even_columns(width: int, height: int) -> int:
    mask = 0
    for x in range(0, width, 2):
        mask |= column_mask(width, height, x, x)
    return mask


def free_mask(state: SearchState) -> int:
    board = state.board
    region = (1 << (board.width * state.ceiling)) - 1
    return ~board.bits & region


def walls_admit(state: SearchState) -> bool:
    """Split the region at full-height walls; each part needs a multiple of four free cells.

    Columns x and x + 1 form a wall when no row has both cells free: no piece
    can then cover cells on both sides.
    """
    width, ceiling = state.board.width, state.ceiling
    if ceiling == 0 or width == 1:
        return True
    free = free_mask(state)
    # Bit x set: columns x and x + 1 are both free in that row.
    pairs = free & (free >> 1) & ~column_mask(width, ceiling, width - 1, width - 1)
    first = 0
    for x in range(width - 1):
        if pairs & column_mask(width, ceiling, x, x):
            continue
        if (free & column_mask(width, ceiling, first, x)).bit_count() % 4:
            return False
        first = x + 1
    return (free & column_mask(width, ceiling, first, width - 1)).bit_count() % 4 == 0


def _reachable_sums(pieces: Sequence[PieceType]) -> FrozenSet[int]:
    sums: Set[int] = {0}
    for piece in pieces:
        sums = {s + d for s in sums for d in EVEN_COLUMN_SPLITS[piece]}
    return frozenset(sums)


def candidate_selections(upcoming: Sequence[PieceType], needed: int, allows_hold: bool) -> List[Sequence[PieceType]]:
    """Multisets of pieces the next ``needed`` placements can use.

    Without hold these are exactly the next ``needed`` pieces. With hold one of
    the next ``needed + 1`` pieces may stay behind.
    """
    if not allows_hold or len(upcoming) <= needed:
        return [upcoming[:needed]]
    window = upcoming[:needed + 1]
    selections = []
    skipped = set()
    for i, piece in enumerate(window):
        if piece in skipped:
            continue
        skipped.add(piece)
        selections.append(window[:i] + window[i + 1:])
    return selections


def parity_admits(state: SearchState, allows_hold: bool) -> bool:
    """Free cells on even columns must match what the upcoming pieces can cover."""
    free = free_mask(state)
    total = free.bit_count()
    needed = total // 4
    if needed == 0:
        return True
    even = (free & _even_columns(state.board.width, state.ceiling)).bit_count()
    upcoming = state.remaining if state.hold is None else (state.hold,) + state.remaining
    return any(
        even in _reachable_sums(selection)
        for selection in candidate_selections(upcoming, needed, allows_hold)
    )


def admits(state: SearchState, allows_hold: bool) -> bool:
    free = state.free_cells
    if free % 4 or free // 4 > state.supply:
        return False
    return walls_admit(state) and parity_admits(state, allows_hold)
