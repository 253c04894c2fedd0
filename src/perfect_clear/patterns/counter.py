from __future__ import annotations

from dataclasses import dataclass
from math import comb
from typing import Iterable, Iterator, List, Tuple

from ..errors import ConfigurationError
from ..game import Order, PieceType, parse_order


@dataclass(frozen=True)
class PieceCounter:
    """Multiset of piece types, indexed by PieceType."""

    counts: Tuple[int, ...] = (0,) * len(PieceType)

    def __post_init__(self) -> None:
        if len(self.counts) != len(PieceType) or any(c < 0 for c in self.counts):
            raise ConfigurationError(f"invalid piece counts {self.counts}")

    @classmethod
    def empty(cls) -> "PieceCounter":
        return cls()

    @classmethod
    def one_of_each(cls) -> "PieceCounter":
        return cls((1,) * len(PieceType))

    @classmethod
    def from_pieces(cls, pieces: "str | Iterable[PieceType | str]") -> "PieceCounter":
        counts = [0] * len(PieceType)
        for piece in parse_order(pieces):
            counts[piece] += 1
        return cls(tuple(counts))

    def __getitem__(self, piece: PieceType) -> int:
        return self.counts[piece]

    def __len__(self) -> int:
        return sum(self.counts)

    def __add__(self, other: "PieceCounter") -> "PieceCounter":
        return PieceCounter(tuple(a + b for a, b in zip(self.counts, other.counts)))

    def __sub__(self, other: "PieceCounter") -> "PieceCounter":
        return PieceCounter(tuple(a - b for a, b in zip(self.counts, other.counts)))

    def contains(self, other: "PieceCounter") -> bool:
        return all(a >= b for a, b in zip(self.counts, other.counts))

    def is_empty(self) -> bool:
        return not any(self.counts)

    def pairs(self) -> List[Tuple[PieceType, int]]:
        return [(piece, self.counts[piece]) for piece in PieceType if self.counts[piece]]

    def pieces(self) -> Order:
        return tuple(piece for piece, count in self.pairs() for _ in range(count))

    def permutation_count(self, pop: int) -> int:
        """Number of distinct ordered selections of ``pop`` pieces."""
        # ways[n]: distinct sequences of length n over the piece types seen so far.
        ways = [1] + [0] * pop
        for _piece, count in self.pairs():
            nxt = [0] * (pop + 1)
            for n, w in enumerate(ways):
                if not w:
                    continue
                for k in range(min(count, pop - n) + 1):
                    nxt[n + k] += w * comb(n + k, k)
            ways = nxt
        return ways[pop]

    def permutations(self, pop: int) -> Iterator[Order]:
        """Distinct ordered selections of ``pop`` pieces, in PieceType order."""
        counts = list(self.counts)

        def walk(left: int) -> Iterator[Order]:
            if left == 0:
                yield ()
                return
            for piece in PieceType:
                if counts[piece]:
                    counts[piece] -= 1
                    for rest in walk(left - 1):
                        yield (piece,) + rest
                    counts[piece] += 1

        return walk(pop)

    def __str__(self) -> str:
        return "[" + "".join(piece.symbol * count for piece, count in self.pairs()) + "]"
