"""Patterns: compact descriptions of sets of piece orders.

A pattern is a sequence of elements. Every element stands for a set of
fixed-length piece sequences, and the pattern stands for every concatenation
that picks one sequence per element. Since each element has a fixed length,
distinct picks always give distinct orders, so expansion never emits a
duplicate and the order count is the product of the element counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import Iterable, Iterator, Sequence, Tuple, Union

from ..errors import ConfigurationError
from ..game import Order, PieceType, format_order, parse_order
from .counter import PieceCounter
from .cursor import OrderCursor


@dataclass(frozen=True)
class One:
    """A single fixed piece (``T``)."""

    piece: PieceType

    def __post_init__(self) -> None:
        if not isinstance(self.piece, PieceType):
            object.__setattr__(self, "piece", PieceType.from_symbol(self.piece))

    @property
    def dim(self) -> int:
        return 1

    def count(self) -> int:
        return 1

    def sequences(self) -> Iterator[Order]:
        yield (self.piece,)

    def matches(self, pieces: Order) -> bool:
        return pieces == (self.piece,)

    def __str__(self) -> str:
        return self.piece.symbol


@dataclass(frozen=True)
class Fixed:
    """A fixed run of pieces (``TIO``)."""

    pieces: Order

    def __post_init__(self) -> None:
        object.__setattr__(self, "pieces", parse_order(self.pieces))
        if not self.pieces:
            raise ConfigurationError("a fixed sequence needs at least one piece")

    @property
    def dim(self) -> int:
        return len(self.pieces)

    def count(self) -> int:
        return 1

    def sequences(self) -> Iterator[Order]:
        yield self.pieces

    def matches(self, pieces: Order) -> bool:
        return pieces == self.pieces

    def __str__(self) -> str:
        return format_order(self.pieces)


@dataclass(frozen=True)
class Alternatives:
    """Any one piece out of a set at this position (``[SZ]``)."""

    pieces: Order

    def __post_init__(self) -> None:
        # Deduplicated and sorted so the same set always expands the same way.
        object.__setattr__(self, "pieces", tuple(sorted(set(parse_order(self.pieces)))))
        if not self.pieces:
            raise ConfigurationError("an alternative set needs at least one piece")

    @property
    def dim(self) -> int:
        return 1

    def count(self) -> int:
        return len(self.pieces)

    def sequences(self) -> Iterator[Order]:
        for piece in self.pieces:
            yield (piece,)

    def matches(self, pieces: Order) -> bool:
        return pieces[0] in self.pieces

    def __str__(self) -> str:
        return "[" + format_order(self.pieces) + "]"


def Wildcard() -> Alternatives:
    """Any of the seven pieces (``*``)."""
    return Alternatives(tuple(PieceType))


@dataclass(frozen=True)
class Permutation:
    """Ordered selections of ``pop`` pieces from a multiset (``[TIO]p2``).

    Repeated pieces in the multiset do not produce repeated orders:
    ``[JJS]p3`` stands for JJS, JSJ and SJJ.
    """

    counter: PieceCounter
    pop: int

    def __post_init__(self) -> None:
        if self.counter.is_empty():
            raise ConfigurationError("a permutation needs at least one piece")
        if not 0 < self.pop <= len(self.counter):
            raise ConfigurationError(
                f"cannot take {self.pop} pieces from {self.counter} ({len(self.counter)} available)"
            )

    @property
    def dim(self) -> int:
        return self.pop

    def count(self) -> int:
        return self.counter.permutation_count(self.pop)

    def sequences(self) -> Iterator[Order]:
        return self.counter.permutations(self.pop)

    def matches(self, pieces: Order) -> bool:
        return self.counter.contains(PieceCounter.from_pieces(pieces))

    def __str__(self) -> str:
        return f"{self.counter}p{self.pop}"


def Factorial(counter: PieceCounter) -> Permutation:
    """Every arrangement of the whole multiset (``[TIOLJSZ]p7``, ``*!``)."""
    return Permutation(counter, len(counter))


@dataclass(frozen=True)
class Bag:
    """The next ``length`` pieces of a 7-bag randomizer.

    Pieces are dealt from consecutive bags, each a shuffle of all seven types.
    ``used`` lists the pieces the current bag has already dealt.
    """

    length: int
    used: Order = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "used", parse_order(self.used))
        if self.length < 1:
            raise ConfigurationError("a bag element needs a positive length")
        if len(set(self.used)) != len(self.used):
            raise ConfigurationError(f"a bag cannot deal {format_order(self.used)}: pieces repeat")

    def segments(self) -> Tuple[Permutation, ...]:
        """Bag-by-bag split of the element into permutations."""
        remaining = PieceCounter.one_of_each() - PieceCounter.from_pieces(self.used)
        if remaining.is_empty():
            remaining = PieceCounter.one_of_each()
        parts = []
        left = self.length
        while left:
            take = min(left, len(remaining))
            parts.append(Permutation(remaining, take))
            left -= take
            remaining = PieceCounter.one_of_each()
        return tuple(parts)

    @property
    def dim(self) -> int:
        return self.length

    def count(self) -> int:
        return prod(part.count() for part in self.segments())

    def sequences(self) -> Iterator[Order]:
        return _concatenations(self.segments())

    def matches(self, pieces: Order) -> bool:
        start = 0
        for part in self.segments():
            if not part.matches(pieces[start:start + part.dim]):
                return False
            start += part.dim
        return True

    def __str__(self) -> str:
        used = f"/{format_order(self.used)}" if self.used else ""
        return f"bag{used}x{self.length}"


PatternElement = Union[One, Fixed, Alternatives, Permutation, Bag]


def _concatenations(elements: Sequence[PatternElement]) -> Iterator[Order]:
    """Lazily walk the product of the elements' sequences, leftmost element slowest."""
    if not elements:
        yield ()
        return
    head, tail = elements[0], elements[1:]
    for first in head.sequences():
        for rest in _concatenations(tail):
            yield first + rest


class Pattern:
    """An ordered, non-empty list of pattern elements."""

    def __init__(self, elements: Iterable[PatternElement]) -> None:
        self.elements: Tuple[PatternElement, ...] = tuple(elements)
        if not self.elements:
            raise ConfigurationError("a pattern needs at least one element")
        for element in self.elements:
            if not isinstance(element, (One, Fixed, Alternatives, Permutation, Bag)):
                raise ConfigurationError(f"unsupported pattern element {element!r}")

    @classmethod
    def from_order(cls, pieces: "str | Iterable[PieceType | str]") -> "Pattern":
        return cls([Fixed(parse_order(pieces))])

    @property
    def dim(self) -> int:
        """Pieces in each order."""
        return sum(element.dim for element in self.elements)

    def count(self) -> int:
        """Number of distinct orders the pattern stands for."""
        return prod(element.count() for element in self.elements)

    def orders(self) -> Iterator[Order]:
        return _concatenations(self.elements)

    def contains(self, pieces: "str | Iterable[PieceType | str]") -> bool:
        """Whether the first ``dim`` pieces form one of the pattern's orders.

        Pieces beyond ``dim`` are ignored, so ``TSOZ`` belongs to ``Pattern.from_order("TSO")``.
        """
        pieces = parse_order(pieces)
        if len(pieces) < self.dim:
            return False
        start = 0
        for element in self.elements:
            if not element.matches(pieces[start:start + element.dim]):
                return False
            start += element.dim
        return True

    def cursor(self) -> OrderCursor:
        return OrderCursor(self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Pattern) and self.elements == other.elements

    def __hash__(self) -> int:
        return hash(self.elements)

    def __repr__(self) -> str:
        return f"Pattern({', '.join(str(e) for e in self.elements)})"
