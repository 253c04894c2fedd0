from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .game.grid import Board
    from .game.pieces import Placement


class PerfectClearError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(PerfectClearError):
    """The query is ill-formed and cannot be searched.

    Raised before any search starts: bad board geometry, an empty or
    contradictory pattern, or an order too short to fill the board.
    """


class PlacementError(PerfectClearError):
    """A piece was written over a filled cell or outside the board.

    Placements produced by the move generator never trigger this, so seeing it
    during a search means an internal invariant was broken.
    """

    def __init__(self, message: str, board: Optional["Board"] = None,
                 placement: Optional["Placement"] = None) -> None:
        self.board = board
        self.placement = placement
        if board is not None and placement is not None:
            message = f"{message}: {placement} on\n{board.to_text()}"
        super().__init__(message)
