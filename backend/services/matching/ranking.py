"""Ranking orchestrator: score a candidate set under a bounded worker pool.

Per invocation:
    collecting -> scoring -> sorting -> paginating -> done
                     └──(cancel event / deadline)──> cancelled

Scores are computed over the full eligible set and only then sorted and
sliced, so a page never depends on worker scheduling order. Sort keys:
overall score desc, recency desc (unknown last), entity id asc.
"""

import asyncio
import inspect
import logging
import math
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

from models.schemas.match_score import MatchScore
from models.schemas.ranking import RankedItem, RankedResult, ScoringFailure
from services.errors import RankingCancelledError

logger = logging.getLogger(__name__)

MAX_DEFAULT_CONCURRENCY = 16

ScoreFn = Callable[[Any], MatchScore | Awaitable[MatchScore]]


def default_concurrency() -> int:
    return max(1, min(os.cpu_count() or 1, MAX_DEFAULT_CONCURRENCY))


class RankingState(str, Enum):
    COLLECTING = "collecting"
    SCORING = "scoring"
    SORTING = "sorting"
    PAGINATING = "paginating"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass
class RankElement:
    """One member of the candidate set."""
    entity_id: int
    entity: Any
    recency: datetime | None = None  # published_at / profile updated_at


@dataclass
class RankingRun:
    """Mutable bookkeeping for a single rank() call. Never shared."""
    label: str = "ranking"
    state: RankingState = RankingState.COLLECTING
    scored: list[tuple[RankElement, MatchScore]] = field(default_factory=list)
    failures: list[ScoringFailure] = field(default_factory=list)
    started: float = field(default_factory=time.monotonic)

    def advance(self, state: RankingState) -> None:
        logger.debug("%s: %s -> %s", self.label, self.state.value, state.value)
        self.state = state


def _sort_key(pair: tuple[RankElement, MatchScore]) -> tuple:
    element, score = pair
    recency = element.recency
    return (
        -score.overall_score,
        recency is None,
        -recency.timestamp() if recency is not None else 0.0,
        element.entity_id,
    )


class RankingOrchestrator:
    def __init__(
        self,
        concurrency: int | None = None,
        min_score: float = 0.0,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ) -> None:
        if concurrency is not None and concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.concurrency = concurrency or default_concurrency()
        self.min_score = min_score
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def normalize_page(self, page: int | None, limit: int | None) -> tuple[int, int]:
        page = page if page and page > 0 else 1
        if not limit or limit < 1:
            limit = self.default_page_size
        return page, min(limit, self.max_page_size)

    async def rank(
        self,
        elements: Iterable[RankElement],
        score_fn: ScoreFn,
        page: int | None = 1,
        limit: int | None = None,
        min_score: float | None = None,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
        label: str = "ranking",
    ) -> RankedResult:
        """Score every element, then sort, filter and paginate.

        Raises RankingCancelledError, carrying the partial result, when
        ``cancel_event`` is set or ``timeout`` seconds pass before every
        element has been scored.
        """
        run = RankingRun(label=label)
        page, limit = self.normalize_page(page, limit)
        cutoff = self.min_score if min_score is None else min_score

        queue: asyncio.Queue[RankElement] = asyncio.Queue()
        for element in elements:
            queue.put_nowait(element)
        n_elements = queue.qsize()

        run.advance(RankingState.SCORING)
        stop = asyncio.Event()
        timed_out = await self._score_all(queue, score_fn, run, stop, timeout, cancel_event)

        interrupted = not queue.empty() or len(run.scored) + len(run.failures) < n_elements
        if interrupted:
            run.advance(RankingState.CANCELLED)
        else:
            run.advance(RankingState.SORTING)

        ordered = sorted(run.scored, key=_sort_key)
        eligible = [pair for pair in ordered if pair[1].overall_score >= cutoff]

        if not interrupted:
            run.advance(RankingState.PAGINATING)
        result = _paginate(eligible, page, limit, run.failures)

        if run.failures:
            logger.warning(
                "%s: skipped %d of %d element(s) that failed to score",
                label, len(run.failures), n_elements,
            )

        if interrupted:
            reason = "timed out" if timed_out else "cancelled"
            logger.warning(
                "%s %s: %d of %d element(s) scored",
                label, reason, len(run.scored), n_elements,
            )
            raise RankingCancelledError(result, reason=reason, scored=len(run.scored))

        run.advance(RankingState.DONE)
        logger.info(
            "%s: ranked %d element(s) in %.3fs (%d eligible, %d skipped)",
            label, n_elements, time.monotonic() - run.started, len(eligible), len(run.failures),
        )
        return result

    async def _score_all(
        self,
        queue: "asyncio.Queue[RankElement]",
        score_fn: ScoreFn,
        run: RankingRun,
        stop: asyncio.Event,
        timeout: float | None,
        cancel_event: asyncio.Event | None,
    ) -> bool:
        """Drain the queue with a fixed pool of workers. Returns True on timeout."""
        is_async = inspect.iscoroutinefunction(score_fn)

        def halted() -> bool:
            return stop.is_set() or (cancel_event is not None and cancel_event.is_set())

        async def worker() -> None:
            while not halted():
                try:
                    element = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                try:
                    if is_async:
                        score = await score_fn(element.entity)
                    else:
                        score = await asyncio.to_thread(score_fn, element.entity)
                        if inspect.isawaitable(score):
                            score = await score
                except Exception as e:
                    logger.warning("%s: element %s failed to score: %s", run.label, element.entity_id, e)
                    run.failures.append(ScoringFailure(entity_id=element.entity_id, reason=str(e)))
                else:
                    run.scored.append((element, score))

        n_workers = min(self.concurrency, max(1, queue.qsize()))
        workers = [asyncio.create_task(worker()) for _ in range(n_workers)]
        try:
            _, pending = await asyncio.wait(workers, timeout=timeout)
        except asyncio.CancelledError:
            stop.set()
            for task in workers:
                task.cancel()
            raise

        if not pending:
            return False
        # Deadline passed: stop dispatching, let in-flight elements finish
        stop.set()
        await asyncio.gather(*pending)
        return True


def _paginate(
    eligible: list[tuple[RankElement, MatchScore]],
    page: int,
    limit: int,
    failures: list[ScoringFailure],
) -> RankedResult:
    total = len(eligible)
    start = (page - 1) * limit
    window = eligible[start:start + limit]
    return RankedResult(
        items=[
            RankedItem(entity_id=element.entity_id, entity=element.entity, score=score)
            for element, score in window
        ],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
        skipped=len(failures),
        failures=sorted(failures, key=lambda f: f.entity_id),
    )
