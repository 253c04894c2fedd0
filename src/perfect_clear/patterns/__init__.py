"""Pattern expansion: compact order descriptions to concrete piece orders."""

from .counter import PieceCounter
from .cursor import OrderCursor
from .pattern import (
    Alternatives,
    Bag,
    Factorial,
    Fixed,
    One,
    Pattern,
    PatternElement,
    Permutation,
    Wildcard,
)

__all__ = [
    "PieceCounter",
    "OrderCursor",
    "Alternatives",
    "Bag",
    "Factorial",
    "Fixed",
    "One",
    "Pattern",
    "PatternElement",
    "Permutation",
    "Wildcard",
]
