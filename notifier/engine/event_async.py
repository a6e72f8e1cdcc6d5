"""
Concurrent event for the notifier engine.

EventAsync has the same surface as Event, but every registered member of
a notified kind runs as its own unit of work on a thread pool. notify()
fans out one unit per member and then blocks until every unit has
finished. Repeated registrations of one mutable cell share a unit and
are called in sequence. It is a join barrier, not fire-and-forget:
when notify() returns, all subscribers have been called.

There is no timeout. A subscriber that never returns blocks notify()
forever.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from notifier.engine.config import EventConfig, SubscriberKind
from notifier.engine.event import BaseEvent, invoke_member

logger = logging.getLogger(__name__)


def group_units(kind: SubscriberKind, members: tuple[Any, ...]) -> list[tuple[Any, ...]]:
    """
    Split members into units of work, in registration order.

    Every member is its own unit, except that repeated registrations of
    one mutable cell share a unit: one cell can only be borrowed mutably
    by one thread at a time.
    """
    if kind is not SubscriberKind.SUBSCRIBERS_MUT:
        return [(member,) for member in members]

    groups: dict[int, list[Any]] = {}
    for member in members:
        groups.setdefault(id(member), []).append(member)
    return [tuple(group) for group in groups.values()]


def run_unit(kind: SubscriberKind, unit: tuple[Any, ...]) -> None:
    for member in unit:
        invoke_member(kind, member)


class EventAsync(BaseEvent):
    """
    Observer-pattern event that notifies subscribers concurrently.

    Args:
        config: notification policy, defaults to notify all / clear none
        max_workers: upper bound on worker threads per notified kind.
            None spawns one worker per registered member.

    If any unit raises, the barrier still waits for the remaining units
    of that kind; the first failure in registration order is then
    re-raised. The kind is not counted and the clear policy is skipped.
    Units that already ran are not rolled back.
    """

    def __init__(
        self,
        config: EventConfig | None = None,
        max_workers: int | None = None,
    ) -> None:
        super().__init__(config)
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int | None:
        return self._max_workers

    def _dispatch(self, kind: SubscriberKind, members: tuple[Any, ...]) -> None:
        units = group_units(kind, members)
        workers = len(units)
        if self._max_workers is not None:
            workers = min(workers, self._max_workers)

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix=f"notifier-{kind.value}"
        ) as pool:
            futures: list[Future] = [
                pool.submit(run_unit, kind, unit) for unit in units
            ]
            wait(futures)

        failures = [
            (unit[0], future.exception())
            for unit, future in zip(units, futures)
            if future.exception() is not None
        ]
        if not failures:
            return

        for member, exc in failures:
            logger.error(
                "%s subscriber %r failed: %s: %s",
                kind.value,
                member,
                type(exc).__name__,
                exc,
            )
        raise failures[0][1]
