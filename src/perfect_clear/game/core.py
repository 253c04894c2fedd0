from __future__ import annotations

from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .grid import Board
from .pieces import Orientation, PieceType, Placement, ShapeMask, kicks_of, shape_masks
from .rules import MoveMode, MoveRules


State = Tuple[int, int, int]  # orientation, x, y

_SHIFTS = (-1, 1)  # left, right
_ROTATIONS = (1, -1)  # clockwise, counterclockwise


class _Field:
    """Collision view of a board for one piece: the board plus open rows above it."""

    def __init__(self, board: Board, piece: PieceType, ceiling: int, headroom: int) -> None:
        self.bits = board.bits
        self.width = board.width
        self.piece = piece
        self.ceiling = ceiling
        self.top = ceiling + headroom
        self.masks = shape_masks(piece, board.width)

    def fits(self, orientation: int, x: int, y: int) -> bool:
        shape: ShapeMask = self.masks[orientation]
        if x + shape.min_dx < 0 or x + shape.max_dx >= self.width:
            return False
        if y + shape.min_dy < 0 or y + shape.max_dy >= self.top:
            return False
        return not (self.bits >> ((x + shape.min_dx) + (y + shape.min_dy) * self.width)) & shape.mask

    def placed_mask(self, orientation: int, x: int, y: int) -> int:
        shape = self.masks[orientation]
        return shape.mask << ((x + shape.min_dx) + (y + shape.min_dy) * self.width)

    def below_ceiling(self, orientation: int, y: int) -> bool:
        return y + self.masks[orientation].max_dy < self.ceiling

    def rotate(self, state: State, delta: int) -> Optional[State]:
        orientation, x, y = state
        src = Orientation(orientation)
        dst = src.rotated(delta)
        for kx, ky in kicks_of(self.piece, src, dst):
            if self.fits(dst, x + kx, y + ky):
                return int(dst), x + kx, y + ky
        return None

    def drop(self, state: State) -> State:
        orientation, x, y = state
        while self.fits(orientation, x, y - 1):
            y -= 1
        return orientation, x, y

    def spawn_states(self) -> List[State]:
        """North at the centre column, two rows above the ceiling.

        On fields too narrow for the North shape, every orientation that fits
        at the spawn row becomes a start state instead.
        """
        states = []
        for orientation in Orientation:
            shape = self.masks[orientation]
            x = min(max((self.width - 1) // 2, -shape.min_dx), self.width - 1 - shape.max_dx)
            y = self.ceiling + 2 - shape.min_dy
            if self.fits(orientation, x, y):
                states.append((int(orientation), x, y))
                if orientation == Orientation.NORTH:
                    break
        return states


class MoveGenerator:
    """Enumerates every resting placement of a piece reachable from spawn."""

    def __init__(self, rules: Optional[MoveRules] = None) -> None:
        self.rules = rules or MoveRules()

    def _neighbours(self, field: _Field, state: State) -> Iterator[State]:
        orientation, x, y = state
        for dx in _SHIFTS:
            if field.fits(orientation, x + dx, y):
                yield orientation, x + dx, y
        for delta in _ROTATIONS:
            rotated = field.rotate(state, delta)
            if rotated is not None:
                yield rotated
        if self.rules.mode is MoveMode.SOFTDROP and field.fits(orientation, x, y - 1):
            yield orientation, x, y - 1

    def _reachable(self, field: _Field) -> Set[State]:
        starts = field.spawn_states()
        visited: Set[State] = set(starts)
        queue = deque(starts)
        while queue:
            state = queue.popleft()
            for nxt in self._neighbours(field, state):
                if nxt not in visited:
                    visited.add(nxt)
                    queue.append(nxt)
        return visited

    def _resting_states(self, board: Board, piece: PieceType, ceiling: Optional[int]) -> Tuple[_Field, List[State]]:
        ceiling = board.height if ceiling is None else ceiling
        field = _Field(board, piece, ceiling, self.rules.headroom)
        reachable = self._reachable(field)
        if self.rules.mode is MoveMode.HARDDROP:
            resting = {field.drop(state) for state in reachable}
        else:
            resting = {(o, x, y) for o, x, y in reachable if not field.fits(o, x, y - 1)}
        # Lowest first: the search tries to fill the bottom of the field before the top.
        states = sorted(
            (s for s in resting if field.below_ceiling(s[0], s[2])),
            key=lambda s: (s[2], s[1], s[0]),
        )
        return field, states

    def generate(self, board: Board, piece: PieceType, ceiling: Optional[int] = None) -> List[Placement]:
        """All resting placements, one per distinct (orientation, x, y).

        Only placements whose cells all lie below ``ceiling`` (default: the
        board height) are returned.
        """
        _field, states = self._resting_states(board, piece, ceiling)
        return [Placement(piece, Orientation(o), x, y) for o, x, y in states]

    def generate_minimized(self, board: Board, piece: PieceType, ceiling: Optional[int] = None) -> List[Placement]:
        """Like ``generate`` but keeps one placement per set of occupied cells."""
        field, states = self._resting_states(board, piece, ceiling)
        seen: Dict[int, Placement] = {}
        for o, x, y in states:
            mask = field.placed_mask(o, x, y)
            if mask not in seen:
                seen[mask] = Placement(piece, Orientation(o), x, y)
        return list(seen.values())
