"""Concurrent solver fanning simulated days out across a bounded thread pool."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import queue
import threading
import time
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config import SolverConfig
from .aggregate import compute_day
from .types import DataPoint, SimulationRequest, SimulationResponse

LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


class SimulationError(Exception):
    """Base class for errors surfaced by the solver."""


class SimulationCancelled(SimulationError):
    """Raised when the caller's context expired before any work was scheduled."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"simulation aborted before start: {reason}")
        self.reason = reason


@dataclass
class RunContext:
    """Caller-side cancellation flag and optional monotonic deadline.

    The solver inspects the context once, before dispatching workers.  Work
    that has already started always runs to completion.
    """

    deadline: Optional[float] = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float | None) -> "RunContext":
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def error(self) -> SimulationCancelled | None:
        """Return the pending cancellation, if any."""

        if self._cancelled.is_set():
            return SimulationCancelled("cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return SimulationCancelled("deadline_exceeded")
        return None


def _check_context(context: RunContext | None) -> None:
    if context is None:
        return
    error = context.error()
    if error is not None:
        raise error


def _fan_out(
    count: int,
    max_workers: int,
    work: Callable[[int], _T],
    *,
    name: str,
) -> List[_T]:
    """Evaluate ``work(i)`` for ``i in range(count)`` on a private worker pool.

    Results land in a pre-sized slot list; each index is pulled from the shared
    queue by exactly one worker, so no two workers ever write the same slot.
    """

    slots: List[Optional[_T]] = [None] * count
    tasks: "queue.SimpleQueue[int]" = queue.SimpleQueue()
    for index in range(count):
        tasks.put(index)

    def drain() -> None:
        while True:
            try:
                index = tasks.get_nowait()
            except queue.Empty:
                return
            slots[index] = work(index)

    worker_count = max(1, min(max_workers, count))
    with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix=name) as executor:
        futures = [executor.submit(drain) for _ in range(worker_count)]
        for future in futures:
            future.result()
    return slots  # type: ignore[return-value]


class Solver:
    """Run day-by-day PK/PD simulations for single requests and batches."""

    def __init__(self, config: SolverConfig | None = None) -> None:
        self._config = config if config is not None else SolverConfig()

    @property
    def config(self) -> SolverConfig:
        return self._config

    def run(
        self,
        request: SimulationRequest | None,
        context: RunContext | None = None,
    ) -> SimulationResponse:
        """Simulate ``request.duration_days`` days and return them in day order."""

        _check_context(context)
        if request is None or request.duration_days <= 0:
            LOGGER.debug("Empty simulation request; returning no data points")
            return SimulationResponse()

        days = int(request.duration_days)
        compounds = tuple(request.compounds or ())

        def evaluate(day: int) -> DataPoint:
            return compute_day(compounds, day, self._config)

        data_points = _fan_out(days, self._config.max_concurrency, evaluate, name="physiosim-day")
        return SimulationResponse(data_points=tuple(data_points))

    def run_batch(
        self,
        requests: Sequence[SimulationRequest | None] | None,
        context: RunContext | None = None,
    ) -> List[SimulationResponse]:
        """Run every request concurrently and return responses in input order.

        Each batch worker calls :meth:`run`, which builds its own day pool, so
        up to ``max_concurrency ** 2`` day workers can be live at once.
        """

        _check_context(context)
        if not requests:
            return []

        batch = list(requests)
        LOGGER.debug(
            "Running batch of %d requests (outer workers=%d, worst-case day workers=%d)",
            len(batch),
            min(self._config.max_concurrency, len(batch)),
            min(self._config.max_concurrency, len(batch)) * self._config.max_concurrency,
        )
        return _fan_out(len(batch), self._config.max_concurrency, lambda idx: self.run(batch[idx]), name="physiosim-batch")


__all__ = ["RunContext", "SimulationCancelled", "SimulationError", "Solver"]
