"""
Subscriber bookkeeping shared by Event and EventAsync.

The registry keeps one ordered list per subscriber kind and a lifetime
counter per kind. Handles are matched by identity (`is`), never by
equality: the same subscriber object may be registered with several
events, and two distinct subscribers may compare equal.
"""

import logging
from typing import Any, Iterable

from notifier.engine.config import ALL_KINDS, SubscriberKind
from notifier.engine.errors import SubscriberNotFoundError

logger = logging.getLogger(__name__)

_COLLECTION_NAMES = {
    SubscriberKind.SUBSCRIBERS: "subscribers",
    SubscriberKind.SUBSCRIBERS_MUT: "mutable subscribers",
    SubscriberKind.FN_SUBSCRIBERS: "function subscribers",
}


def find_by_identity(items: list[Any], handle: Any) -> int | None:
    """Return the index of the first entry that *is* handle, or None."""
    for index, item in enumerate(items):
        if item is handle:
            return index
    return None


def swap_remove(items: list[Any], index: int) -> Any:
    """
    Remove items[index] by moving the last entry into its place.

    Constant time; the order of the remaining entries is not preserved.
    """
    last = items.pop()
    if index == len(items):
        return last
    removed = items[index]
    items[index] = last
    return removed


class NotificationRegistry:
    """
    Ordered subscriber collections plus lifetime notification counters.

    Counters only ever grow. Clearing a collection leaves its counter
    untouched.
    """

    def __init__(self, kinds: Iterable[SubscriberKind] = ALL_KINDS) -> None:
        self._collections: dict[SubscriberKind, list[Any]] = {
            kind: [] for kind in kinds
        }
        self._counters: dict[SubscriberKind, int] = {
            kind: 0 for kind in self._collections
        }

    def _collection(self, kind: SubscriberKind) -> list[Any]:
        try:
            return self._collections[kind]
        except KeyError:
            raise ValueError(f"This registry does not hold {kind.value}") from None

    def add(self, kind: SubscriberKind, item: Any) -> None:
        """Append item to the collection of the given kind."""
        self._collection(kind).append(item)
        logger.debug("Registered %r as %s", item, kind.value)

    def remove(self, kind: SubscriberKind, handle: Any) -> Any:
        """
        Remove the first entry that is handle.

        Raises:
            SubscriberNotFoundError: if handle is not registered
        """
        items = self._collection(kind)
        index = find_by_identity(items, handle)
        if index is None:
            raise SubscriberNotFoundError(handle, _COLLECTION_NAMES[kind])
        removed = swap_remove(items, index)
        logger.debug("Unregistered %r from %s", handle, kind.value)
        return removed

    def members(self, kind: SubscriberKind) -> tuple[Any, ...]:
        """Snapshot of the collection, in registration order."""
        return tuple(self._collection(kind))

    def count(self, kind: SubscriberKind) -> int:
        return len(self._collection(kind))

    def clear(self, kinds: Iterable[SubscriberKind]) -> None:
        for kind in kinds:
            items = self._collections.get(kind)
            if items:
                logger.debug("Clearing %d %s", len(items), kind.value)
                items.clear()

    def record_notified(self, kind: SubscriberKind) -> None:
        self._counters[kind] += 1

    def times_notified(self, kind: SubscriberKind) -> int:
        return self._counters[kind]

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of sizes and counters, for reports."""
        return {
            kind.value: {
                "registered": len(items),
                "times_notified": self._counters[kind],
            }
            for kind, items in self._collections.items()
        }
