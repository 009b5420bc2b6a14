"""Bounded fan-out of blocking work over a thread pool.

A single `BoundedTaskRunner` caps the number of in-flight units with a
counting semaphore. It is used both to read metadata for every file of a
folder and to rename the labelled files of a folder.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import threading
from typing import Any, Generic, TypeVar

from loguru import logger

T = TypeVar("T")
R = TypeVar("R")


class TaskCancelledError(Exception):
    """Raised into an outcome when the unit never started because of cancellation."""


@dataclass
class TaskOutcome(Generic[T, R]):
    """Result of one unit of work: either `value` or `error` is meaningful."""

    item: T
    value: R | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        """True when the unit completed without raising."""
        return self.error is None


class BoundedTaskRunner:
    """Runs a callable over many inputs with at most `width` in flight.

    The admission gate is acquired before a unit starts and released in a
    `finally` block, so a raising unit never leaks a slot. Outcomes are
    returned in input order; completion order is not observable.
    """

    def __init__(self, width: int = 200) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self._width = width
        self._gate = threading.BoundedSemaphore(width)
        self._in_flight = 0
        self._peak = 0
        self._counter_lock = threading.Lock()

    @property
    def width(self) -> int:
        """Maximum number of concurrently running units."""
        return self._width

    @property
    def peak_in_flight(self) -> int:
        """Highest number of units observed running at the same time."""
        return self._peak

    def run(
        self,
        func: Callable[[T], R],
        items: Iterable[T],
        cancel_event: threading.Event | None = None,
    ) -> list[TaskOutcome[T, R]]:
        """Apply `func` to each item and collect one outcome per item.

        Args:
            func: Blocking callable applied to every item.
            items: Inputs; materialized before dispatch.
            cancel_event: When set, units that have not started yet are
                reported with a `TaskCancelledError` instead of running.
        """
        work = list(items)
        if not work:
            return []

        outcomes: list[TaskOutcome[T, R]] = [TaskOutcome(item=it) for it in work]
        workers = min(self._width, len(work))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="labeler") as pool:
            futures = [
                pool.submit(self._run_one, func, outcome, cancel_event) for outcome in outcomes
            ]
            for fut in futures:
                fut.result()
        failed = sum(1 for o in outcomes if not o.ok)
        if failed:
            logger.debug("Task runner finished {} units, {} failed", len(outcomes), failed)
        return outcomes

    def _run_one(
        self,
        func: Callable[[T], R],
        outcome: TaskOutcome[T, R],
        cancel_event: threading.Event | None,
    ) -> None:
        self._gate.acquire()
        try:
            self._enter()
            try:
                if cancel_event is not None and cancel_event.is_set():
                    outcome.error = TaskCancelledError("cancelled before start")
                    return
                outcome.value = func(outcome.item)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                outcome.error = ex
            finally:
                self._leave()
        finally:
            self._gate.release()

    def _enter(self) -> None:
        with self._counter_lock:
            self._in_flight += 1
            self._peak = max(self._peak, self._in_flight)

    def _leave(self) -> None:
        with self._counter_lock:
            self._in_flight -= 1


def first_error_message(outcome: TaskOutcome[Any, Any]) -> str:
    """Format the outcome's error as a single-line message."""
    if outcome.error is None:
        return ""
    text = str(outcome.error).strip()
    return text or type(outcome.error).__name__
