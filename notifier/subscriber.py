"""
Subscriber capabilities understood by notifier events.

There are three kinds of registrant:

- read-only subscribers, exposing update()
- mutating subscribers, exposing update_mut() and registered through an
  ExclusiveCell so the event can take exclusive access while calling them
- closures, any zero-argument callable

The classes below document the contracts. Registration checks the shape
of the registrant (the method exists and is callable), so subclassing is
optional.
"""

from typing import Any, Callable

from notifier.engine.exclusive import ExclusiveCell


class Subscriber:
    """Read-only capability, notified by Event."""

    def update(self) -> None:
        raise NotImplementedError("Subclasses must implement update()")


class SubscriberMut:
    """Mutating capability, notified by Event under exclusive access."""

    def update_mut(self) -> None:
        raise NotImplementedError("Subclasses must implement update_mut()")


class SubscriberAsync(Subscriber):
    """
    Read-only capability for EventAsync.

    update() runs on a worker thread, possibly at the same time as other
    subscribers of the same event.
    """


class SubscriberAsyncMut(SubscriberMut):
    """Mutating capability for EventAsync, called on a worker thread."""


def has_update(obj: Any) -> bool:
    return callable(getattr(obj, "update", None))


def has_update_mut(obj: Any) -> bool:
    return callable(getattr(obj, "update_mut", None))


def into_subscriber(obj: Any) -> Any:
    """
    Return the shared handle for a read-only subscriber.

    Python references are already shared, so the handle is the object
    itself; unsubscribe() later matches it by identity.
    """
    if not has_update(obj):
        raise TypeError(f"{type(obj).__name__} does not implement update()")
    return obj


def into_mut_subscriber(obj: Any) -> ExclusiveCell:
    """
    Wrap a mutating subscriber in a new ExclusiveCell.

    Keep the returned cell: it is the handle for subscribe_mut() and
    unsubscribe_mut(), and the way to read the subscriber's state.
    """
    if not has_update_mut(obj):
        raise TypeError(f"{type(obj).__name__} does not implement update_mut()")
    return ExclusiveCell(obj)


FnSubscriber = Callable[[], Any]
