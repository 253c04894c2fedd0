from __future__ import annotations

import multiprocessing
from typing import Any, Optional


class CancellationToken:
    """Cooperative stop flag shared by searches and aggregate runs.

    Backed by a ``multiprocessing`` event so that pool workers started with the
    token's event observe a cancel issued in the parent process.
    """

    def __init__(self, event: Optional[Any] = None) -> None:
        self._event = event if event is not None else multiprocessing.Event()

    @property
    def event(self) -> Any:
        return self._event

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
