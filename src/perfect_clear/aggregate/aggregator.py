from __future__ import annotations

import logging
import os
import time
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from typing import Callable, Iterator, List, Optional, Set, Tuple

from ..cancel import CancellationToken
from ..errors import ConfigurationError
from ..game import Board, Order
from ..patterns import OrderCursor, Pattern
from ..search import PcSearcher, SearchConfig, validate_query
from .results import AggregateResult, ChunkOutcome, RunStatus


logger = logging.getLogger(__name__)

EarlyStopping = Callable[[AggregateResult], bool]

_POLL_SECONDS = 0.05

# Set in each pool worker by _init_worker; the parent's run token.
_worker_token: Optional[CancellationToken] = None


def _init_worker(event) -> None:
    global _worker_token
    _worker_token = CancellationToken(event)


def search_chunk(board: Board, config: SearchConfig, orders: Tuple[Order, ...],
                 cancel: Optional[CancellationToken] = None) -> ChunkOutcome:
    """Search a chunk of orders with a cache private to the chunk."""
    cancel = cancel if cancel is not None else _worker_token
    searcher = PcSearcher(board, config)
    verdicts: List[Tuple[Order, bool]] = []
    for order in orders:
        if cancel is not None and cancel.cancelled:
            return ChunkOutcome(tuple(verdicts), aborted=True)
        result = searcher.search(order, cancel)
        if result.aborted:
            return ChunkOutcome(tuple(verdicts), aborted=True)
        verdicts.append((order, result.feasible))
    return ChunkOutcome(tuple(verdicts))


class Aggregator:
    """Runs the perfect clear search over every order of a pattern.

    ``workers=1`` searches in this process and shares one cache across the
    whole run. More workers dispatch chunks of orders to a process pool, each
    chunk with its own cache; at most ``2 * workers`` chunks are in flight.
    Counts are sums over chunks, so they do not depend on which worker
    finishes first.
    """

    def __init__(self, board: Board, config: Optional[SearchConfig] = None,
                 workers: Optional[int] = None, chunk_size: int = 64) -> None:
        if workers is not None and workers < 1:
            raise ConfigurationError(f"workers must be positive, got {workers}")
        if chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        self.board = board
        self.config = config or SearchConfig()
        self.workers = workers or os.cpu_count() or 1
        self.chunk_size = chunk_size

    def run(self, pattern: Pattern, cancel: Optional[CancellationToken] = None,
            collect_orders: bool = False, early_stopping: Optional[EarlyStopping] = None) -> AggregateResult:
        if not isinstance(pattern, Pattern):
            raise ConfigurationError(f"expected a Pattern, got {type(pattern).__name__}")
        validate_query(self.board, pattern.dim)

        result = AggregateResult(pattern_size=pattern.count(), orders={} if collect_orders else None)
        logger.info("searching %d orders of %r with %d worker(s)", result.pattern_size, pattern, self.workers)
        started = time.perf_counter()

        cursor = pattern.cursor()
        if self.workers == 1:
            status = self._run_serial(cursor, result, cancel, early_stopping)
        else:
            status = self._run_parallel(cursor, result, cancel, early_stopping)
        result.status = status

        elapsed = time.perf_counter() - started
        if status is RunStatus.COMPLETED:
            logger.info("%d/%d orders perfect clear (%.2f%%) in %.1fs",
                        result.feasible, result.total, result.rate * 100, elapsed)
        else:
            logger.warning("run %s after %d of %d orders", status.value, result.total, result.pattern_size)
        return result

    def _run_serial(self, cursor: OrderCursor, result: AggregateResult,
                    cancel: Optional[CancellationToken], early_stopping: Optional[EarlyStopping]) -> RunStatus:
        searcher = PcSearcher(self.board, self.config)
        for order in cursor:
            if cancel is not None and cancel.cancelled:
                return RunStatus.ABORTED
            verdict = searcher.search(order, cancel)
            if verdict.aborted:
                return RunStatus.ABORTED
            result.add(order, verdict.feasible)
            if early_stopping is not None and early_stopping(result):
                return RunStatus.STOPPED
        logger.debug("serial run explored %d states", len(searcher.cache))
        return RunStatus.COMPLETED

    def _chunks(self, cursor: OrderCursor) -> Iterator[Tuple[Order, ...]]:
        chunk: List[Order] = []
        for order in cursor:
            chunk.append(order)
            if len(chunk) == self.chunk_size:
                yield tuple(chunk)
                chunk = []
        if chunk:
            yield tuple(chunk)

    def _run_parallel(self, cursor: OrderCursor, result: AggregateResult,
                      cancel: Optional[CancellationToken], early_stopping: Optional[EarlyStopping]) -> RunStatus:
        # Workers watch a token owned by this run; the caller's token is mirrored into it.
        run_token = CancellationToken()
        status = RunStatus.COMPLETED
        chunks = self._chunks(cursor)
        pending: Set[Future] = set()
        exhausted = False

        with ProcessPoolExecutor(max_workers=self.workers, initializer=_init_worker,
                                 initargs=(run_token.event,)) as executor:
            try:
                while True:
                    if cancel is not None and cancel.cancelled and status is RunStatus.COMPLETED:
                        status = RunStatus.ABORTED
                        run_token.cancel()
                    while status is RunStatus.COMPLETED and not exhausted and len(pending) < 2 * self.workers:
                        chunk = next(chunks, None)
                        if chunk is None:
                            exhausted = True
                            break
                        pending.add(executor.submit(search_chunk, self.board, self.config, chunk))
                    if not pending:
                        break
                    done, pending = wait(pending, timeout=_POLL_SECONDS, return_when=FIRST_COMPLETED)
                    for future in done:
                        outcome = future.result()
                        result.merge(outcome)
                        if outcome.aborted and status is RunStatus.COMPLETED:
                            status = RunStatus.ABORTED
                    if status is RunStatus.COMPLETED and early_stopping is not None and early_stopping(result):
                        status = RunStatus.STOPPED
                        run_token.cancel()
            except BaseException:
                run_token.cancel()
                for future in pending:
                    future.cancel()
                raise
        return status
