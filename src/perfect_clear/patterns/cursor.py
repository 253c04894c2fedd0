from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from ..game import Order

if TYPE_CHECKING:
    from .pattern import Pattern


class OrderCursor:
    """Pull-based walk over the orders of a pattern.

    ``next()`` returns the next order or ``None`` once the pattern is
    exhausted. ``reset()`` rewinds to the first order; a rewound cursor emits
    exactly the same orders in the same sequence.
    """

    def __init__(self, pattern: "Pattern") -> None:
        self.pattern = pattern
        self.emitted = 0
        self._orders: Iterator[Order] = pattern.orders()
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next(self) -> Optional[Order]:
        if self._exhausted:
            return None
        order = next(self._orders, None)
        if order is None:
            self._exhausted = True
            return None
        self.emitted += 1
        return order

    def reset(self) -> None:
        self._orders = self.pattern.orders()
        self._exhausted = False
        self.emitted = 0

    def __iter__(self) -> Iterator[Order]:
        while True:
            order = self.next()
            if order is None:
                return
            yield order
