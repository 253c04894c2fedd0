from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import ConfigurationError


# Rows needed above the ceiling to spawn a piece and turn it through every orientation.
MIN_HEADROOM = 6


class MoveMode(Enum):
    HARDDROP = "harddrop"  # shift and rotate at the top, then drop straight down
    SOFTDROP = "softdrop"  # shift, rotate and soft drop anywhere on the way down


@dataclass(frozen=True)
class MoveRules:
    mode: MoveMode = MoveMode.SOFTDROP
    headroom: int = MIN_HEADROOM

    def __post_init__(self) -> None:
        if self.headroom < MIN_HEADROOM:
            raise ConfigurationError(f"headroom must be at least {MIN_HEADROOM}, got {self.headroom}")

    @classmethod
    def srs(cls, mode: MoveMode = MoveMode.SOFTDROP) -> "MoveRules":
        return cls(mode=mode)
