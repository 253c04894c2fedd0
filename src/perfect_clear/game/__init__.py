"""Board and piece model for perfect clear search.

Exports the field model and the placement enumerator:
- Board: immutable bit-packed field with line clearing
- PieceType / Orientation: the seven tetrominoes and their SRS orientations
- Placement: a resting position of one piece
- MoveRules / MoveMode: movement rules used when enumerating placements
- MoveGenerator: every resting placement reachable from spawn
"""

from .grid import Board, apply, is_perfect_clear
from .pieces import (
    Order,
    Orientation,
    PieceType,
    Placement,
    cells_of,
    format_order,
    kicks_of,
    parse_order,
)
from .rules import MoveMode, MoveRules
from .core import MoveGenerator

__all__ = [
    "Board",
    "apply",
    "is_perfect_clear",
    "Order",
    "Orientation",
    "PieceType",
    "Placement",
    "cells_of",
    "format_order",
    "kicks_of",
    "parse_order",
    "MoveMode",
    "MoveRules",
    "MoveGenerator",
]
