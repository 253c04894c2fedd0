from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from ..errors import ConfigurationError, PlacementError
from .pieces import Placement


Coordinate = Tuple[int, int]

_FILLED_CHARS = frozenset("#X")
_EMPTY_CHARS = frozenset("._")


@dataclass(frozen=True)
class Board:
    """Immutable width x height field of empty/filled cells.

    Cells are packed into one integer: bit ``x + y * width`` is set when the
    cell at column ``x``, row ``y`` is filled. Row 0 is the bottom row.
    """

    width: int
    height: int
    bits: int = 0

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"board must be at least 1x1, got {self.width}x{self.height}")
        if self.bits < 0 or self.bits >> (self.width * self.height):
            raise ConfigurationError("board bits fall outside the board")

    @classmethod
    def empty(cls, width: int, height: int) -> "Board":
        return cls(width, height, 0)

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Iterable[Coordinate]) -> "Board":
        bits = 0
        for x, y in cells:
            if not (0 <= x < width and 0 <= y < height):
                raise ConfigurationError(f"filled cell {(x, y)} is outside a {width}x{height} board")
            bits |= 1 << (x + y * width)
        return cls(width, height, bits)

    @classmethod
    def from_text(cls, text: str) -> "Board":
        """Read rows top to bottom; ``#``/``X`` are filled, ``.``/``_`` are empty."""
        lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
        if not lines:
            raise ConfigurationError("board text is empty")
        width = len(lines[0])
        cells: List[Coordinate] = []
        for row, line in enumerate(lines):
            if len(line) != width:
                raise ConfigurationError("board rows must all have the same width")
            y = len(lines) - 1 - row
            for x, char in enumerate(line):
                if char in _FILLED_CHARS:
                    cells.append((x, y))
                elif char not in _EMPTY_CHARS:
                    raise ConfigurationError(f"unexpected board character {char!r}")
        return cls.from_cells(width, len(lines), cells)

    @classmethod
    def from_array(cls, grid: np.ndarray) -> "Board":
        """Build from a 2D array where row 0 is the top row and non-zero is filled."""
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ConfigurationError(f"expected a 2D grid, got shape {grid.shape}")
        height, width = grid.shape
        ys, xs = np.nonzero(grid)
        return cls.from_cells(int(width), int(height), ((int(x), height - 1 - int(y)) for y, x in zip(ys, xs)))

    def to_array(self) -> np.ndarray:
        grid = np.zeros((self.height, self.width), dtype=np.int8)
        for y in range(self.height):
            row = self.row(y)
            for x in range(self.width):
                if row >> x & 1:
                    grid[self.height - 1 - y, x] = 1
        return grid

    def to_text(self) -> str:
        return "\n".join(
            "".join("#" if self.is_filled(x, y) else "." for x in range(self.width))
            for y in reversed(range(self.height))
        )

    @property
    def full_row(self) -> int:
        return (1 << self.width) - 1

    @property
    def filled_count(self) -> int:
        return self.bits.bit_count()

    def row(self, y: int) -> int:
        return (self.bits >> (y * self.width)) & self.full_row

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.bits >> (x + y * self.width) & 1)

    def is_empty(self) -> bool:
        return self.bits == 0

    @property
    def stack_height(self) -> int:
        """Rows up to and including the highest filled cell."""
        return (self.bits.bit_length() + self.width - 1) // self.width

    def clear_lines(self) -> Tuple["Board", int]:
        """Remove rows that are already full, as a lock would."""
        bits, cleared = self._clear_full_lines(self.bits)
        return Board(self.width, self.height, bits), cleared

    def place(self, placement: Placement) -> Tuple["Board", int]:
        """Lock ``placement``, clear full lines and return (board, lines cleared)."""
        bits = self.bits
        for x, y in placement.cells():
            if not self.is_inside(x, y):
                raise PlacementError("placement leaves the board", self, placement)
            cell = 1 << (x + y * self.width)
            if bits & cell:
                raise PlacementError("placement overlaps a filled cell", self, placement)
            bits |= cell
        bits, cleared = self._clear_full_lines(bits)
        return Board(self.width, self.height, bits), cleared

    def _clear_full_lines(self, bits: int) -> Tuple[int, int]:
        full = self.full_row
        kept = 0
        shift = 0
        cleared = 0
        for y in range(self.height):
            row = (bits >> (y * self.width)) & full
            if row == full:
                cleared += 1
                continue
            kept |= row << shift
            shift += self.width
        # Rows above the cleared ones moved down; the top is refilled with empty rows.
        return kept, cleared


def apply(board: Board, placement: Placement) -> Tuple[Board, int]:
    return board.place(placement)


def is_perfect_clear(board: Board) -> bool:
    return board.is_empty()
