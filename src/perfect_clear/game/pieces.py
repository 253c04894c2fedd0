from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..errors import ConfigurationError


Offset = Tuple[int, int]
Cells = Tuple[Offset, ...]


class PieceType(IntEnum):
    I = 0
    O = 1
    T = 2
    S = 3
    Z = 4
    J = 5
    L = 6

    @property
    def symbol(self) -> str:
        return self.name

    @classmethod
    def from_symbol(cls, symbol: str) -> "PieceType":
        try:
            return cls[symbol.upper()]
        except KeyError:
            raise ConfigurationError(f"unknown piece symbol {symbol!r}") from None


class Orientation(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def rotated(self, delta: int) -> "Orientation":
        return Orientation((self + delta) % 4)


Order = Tuple[PieceType, ...]


def parse_order(pieces: "str | Iterable[PieceType | str]") -> Order:
    """Coerce ``"TIO"`` or an iterable of piece types/symbols into an order."""
    return tuple(p if isinstance(p, PieceType) else PieceType.from_symbol(p) for p in pieces)


def format_order(order: Iterable[PieceType]) -> str:
    return "".join(piece.symbol for piece in order)


# North shapes rotated about the SRS rotation centre, y pointing up.
NORTH_SHAPES: Mapping[PieceType, Cells] = MappingProxyType({
    PieceType.I: ((-1, 0), (0, 0), (1, 0), (2, 0)),
    PieceType.O: ((0, 0), (1, 0), (0, 1), (1, 1)),
    PieceType.T: ((-1, 0), (0, 0), (1, 0), (0, 1)),
    PieceType.S: ((-1, 0), (0, 0), (0, 1), (1, 1)),
    PieceType.Z: ((-1, 1), (0, 1), (0, 0), (1, 0)),
    PieceType.J: ((-1, 1), (-1, 0), (0, 0), (1, 0)),
    PieceType.L: ((1, 1), (-1, 0), (0, 0), (1, 0)),
})

# SRS offset data per orientation (N, E, S, W). The kick tests of a rotation
# a -> b are offsets[a][i] - offsets[b][i], normalised so the first test is (0, 0).
_JLSTZ_OFFSETS = (
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
)
_I_OFFSETS = (
    ((0, 0), (-1, 0), (2, 0), (-1, 0), (2, 0)),
    ((-1, 0), (0, 0), (0, 0), (0, 1), (0, -2)),
    ((-1, 1), (1, 1), (-2, 1), (1, 0), (-2, 0)),
    ((0, 1), (0, 1), (0, 1), (0, -1), (0, 2)),
)
_O_OFFSETS = (
    ((0, 0),),
    ((0, -1),),
    ((-1, -1),),
    ((-1, 0),),
)

SRS_OFFSETS: Mapping[PieceType, Tuple[Cells, ...]] = MappingProxyType({
    PieceType.I: _I_OFFSETS,
    PieceType.O: _O_OFFSETS,
    PieceType.T: _JLSTZ_OFFSETS,
    PieceType.S: _JLSTZ_OFFSETS,
    PieceType.Z: _JLSTZ_OFFSETS,
    PieceType.J: _JLSTZ_OFFSETS,
    PieceType.L: _JLSTZ_OFFSETS,
})


def _rotate_cw(cells: Cells, k: int) -> Cells:
    k = k % 4
    for _ in range(k):
        cells = tuple((y, -x) for x, y in cells)
    return cells


def _build_cells() -> Dict[Tuple[PieceType, Orientation], Cells]:
    table: Dict[Tuple[PieceType, Orientation], Cells] = {}
    for piece, north in NORTH_SHAPES.items():
        for orientation in Orientation:
            # The first offset moves the true rotation onto the SRS grid position.
            ox, oy = SRS_OFFSETS[piece][orientation][0]
            table[piece, orientation] = tuple(
                (x - ox, y - oy) for x, y in _rotate_cw(north, orientation)
            )
    return table


def _build_kicks() -> Dict[Tuple[PieceType, Orientation, Orientation], Cells]:
    table: Dict[Tuple[PieceType, Orientation, Orientation], Cells] = {}
    for piece, offsets in SRS_OFFSETS.items():
        for src in Orientation:
            for delta in (1, -1):
                dst = src.rotated(delta)
                (ax, ay), (bx, by) = offsets[src][0], offsets[dst][0]
                table[piece, src, dst] = tuple(
                    ((sx - dx) - (ax - bx), (sy - dy) - (ay - by))
                    for (sx, sy), (dx, dy) in zip(offsets[src], offsets[dst])
                )
    return table


PIECE_CELLS: Mapping[Tuple[PieceType, Orientation], Cells] = MappingProxyType(_build_cells())
KICK_TABLE: Mapping[Tuple[PieceType, Orientation, Orientation], Cells] = MappingProxyType(_build_kicks())


def cells_of(piece: PieceType, orientation: Orientation) -> Cells:
    """Occupied offsets of ``piece`` in ``orientation`` relative to its anchor."""
    return PIECE_CELLS[piece, orientation]


def kicks_of(piece: PieceType, src: Orientation, dst: Orientation) -> Cells:
    """Kick candidates tried in order when rotating ``src`` -> ``dst``."""
    return KICK_TABLE[piece, src, dst]


@dataclass(frozen=True)
class ShapeMask:
    """Bitmask of an oriented piece for a given board width.

    ``mask`` has its lowest cell row and leftmost cell column at bit 0, so a
    piece anchored at (x, y) covers ``mask << ((x + min_dx) + (y + min_dy) * width)``.
    """

    mask: int
    min_dx: int
    max_dx: int
    min_dy: int
    max_dy: int


@lru_cache(maxsize=None)
def shape_masks(piece: PieceType, width: int) -> Tuple[ShapeMask, ...]:
    masks: List[ShapeMask] = []
    for orientation in Orientation:
        cells = PIECE_CELLS[piece, orientation]
        min_dx = min(x for x, _ in cells)
        min_dy = min(y for _, y in cells)
        mask = 0
        for x, y in cells:
            mask |= 1 << ((x - min_dx) + (y - min_dy) * width)
        masks.append(ShapeMask(
            mask=mask,
            min_dx=min_dx,
            max_dx=max(x for x, _ in cells),
            min_dy=min_dy,
            max_dy=max(y for _, y in cells),
        ))
    return tuple(masks)


@dataclass(frozen=True)
class Placement:
    piece: PieceType
    orientation: Orientation
    x: int
    y: int

    def cells(self) -> List[Tuple[int, int]]:
        return [(self.x + dx, self.y + dy) for dx, dy in PIECE_CELLS[self.piece, self.orientation]]

    def __str__(self) -> str:
        return f"{self.piece.symbol}-{self.orientation.name}@({self.x}, {self.y})"
