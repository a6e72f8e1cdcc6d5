"""
Synchronous event for the notifier engine.

An Event owns three ordered subscriber collections (read-only, mutating
and closures), an EventConfig and a lifetime counter per collection.
notify() calls every targeted subscriber on the caller's thread, in
registration order, and then applies the configured clear policy.

Events are not thread-safe: registration must not change while a
notify() call is running.
"""

import logging
from typing import Any, Callable

from notifier.engine.config import DEFAULT_CONFIG, EventConfig, SubscriberKind
from notifier.engine.exclusive import ExclusiveCell
from notifier.engine.registry import NotificationRegistry
from notifier.subscriber import has_update, has_update_mut

logger = logging.getLogger(__name__)


def invoke_member(kind: SubscriberKind, member: Any) -> None:
    """
    Call a single registered member according to its kind.

    Mutating subscribers are called inside an exclusive borrow of their
    cell, which is released before this function returns.
    """
    if kind is SubscriberKind.SUBSCRIBERS:
        member.update()
    elif kind is SubscriberKind.SUBSCRIBERS_MUT:
        with member.borrow_mut() as subscriber:
            subscriber.update_mut()
    else:
        member()


class BaseEvent:
    """
    Registration, counting and clearing shared by both event flavours.

    Subclasses decide how the members of one kind are invoked by
    implementing _dispatch().
    """

    def __init__(self, config: EventConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        if not isinstance(self._config, EventConfig):
            raise TypeError("config must be an EventConfig")
        self._registry = NotificationRegistry()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(subscribers={self._registry.count(SubscriberKind.SUBSCRIBERS)}, "
            f"subscribers_mut={self._registry.count(SubscriberKind.SUBSCRIBERS_MUT)}, "
            f"fn_subscribers={self._registry.count(SubscriberKind.FN_SUBSCRIBERS)})"
        )

    @property
    def config(self) -> EventConfig:
        return self._config

    # -----------------------------------------------------------------
    # Registration
    # -----------------------------------------------------------------

    def subscribe(self, handle: Any) -> None:
        """Register a read-only subscriber (an object with update())."""
        if not has_update(handle):
            raise TypeError(f"{type(handle).__name__} does not implement update()")
        self._registry.add(SubscriberKind.SUBSCRIBERS, handle)

    def subscribe_mut(self, handle: ExclusiveCell) -> None:
        """
        Register a mutating subscriber.

        The handle must be the ExclusiveCell returned by
        into_mut_subscriber(); the cell is what unsubscribe_mut() matches.
        """
        if not isinstance(handle, ExclusiveCell):
            raise TypeError(
                "Mutable subscribers must be registered as an ExclusiveCell, "
                "see into_mut_subscriber()"
            )
        if not has_update_mut(handle.value_type):
            raise TypeError(
                f"{handle.value_type.__name__} does not implement update_mut()"
            )
        self._registry.add(SubscriberKind.SUBSCRIBERS_MUT, handle)

    def subscribe_as_fn(self, func: Callable[[], Any]) -> None:
        """Register a zero-argument callable. It can only be removed by clearing."""
        if not callable(func):
            raise TypeError(f"{type(func).__name__} object is not callable")
        self._registry.add(SubscriberKind.FN_SUBSCRIBERS, func)

    def unsubscribe(self, handle: Any) -> None:
        """
        Remove the first registration of handle.

        Raises:
            SubscriberNotFoundError: if handle was never subscribed
        """
        self._registry.remove(SubscriberKind.SUBSCRIBERS, handle)

    def unsubscribe_mut(self, handle: ExclusiveCell) -> None:
        """
        Remove the first registration of a mutable subscriber cell.

        Raises:
            SubscriberNotFoundError: if handle was never subscribed
        """
        self._registry.remove(SubscriberKind.SUBSCRIBERS_MUT, handle)

    def __iadd__(self, handle: Any):
        self.subscribe(handle)
        return self

    def __isub__(self, handle: Any):
        self.unsubscribe(handle)
        return self

    # -----------------------------------------------------------------
    # Notification
    # -----------------------------------------------------------------

    def notify(self) -> None:
        """
        Notify the kinds selected by the configuration, then clear.

        If a subscriber raises, the exception propagates, the failing
        kind is not counted and nothing is cleared.
        """
        for kind in self._config.subscribers_to_notify.kinds():
            self._notify_kind(kind)
        self._apply_clear_policy()

    def notify_subscribers(self) -> None:
        """Notify only read-only subscribers. Ignores the configuration."""
        self._notify_kind(SubscriberKind.SUBSCRIBERS)

    def notify_subscribers_mut(self) -> None:
        """Notify only mutating subscribers. Ignores the configuration."""
        self._notify_kind(SubscriberKind.SUBSCRIBERS_MUT)

    def notify_fn_subscribers(self) -> None:
        """Notify only closures. Ignores the configuration."""
        self._notify_kind(SubscriberKind.FN_SUBSCRIBERS)

    def _notify_kind(self, kind: SubscriberKind) -> None:
        members = self._registry.members(kind)
        if not members:
            return
        logger.debug("Notifying %d %s", len(members), kind.value)
        self._dispatch(kind, members)
        self._registry.record_notified(kind)

    def _dispatch(self, kind: SubscriberKind, members: tuple[Any, ...]) -> None:
        raise NotImplementedError("Subclasses must implement _dispatch()")

    def _apply_clear_policy(self) -> None:
        self._registry.clear(self._config.clear_after_notification.kinds())

    # -----------------------------------------------------------------
    # Read accessors
    # -----------------------------------------------------------------

    @property
    def subscribers(self) -> tuple[Any, ...]:
        return self._registry.members(SubscriberKind.SUBSCRIBERS)

    @property
    def subscribers_mut(self) -> tuple[ExclusiveCell, ...]:
        return self._registry.members(SubscriberKind.SUBSCRIBERS_MUT)

    @property
    def fn_subscribers(self) -> tuple[Callable[[], Any], ...]:
        return self._registry.members(SubscriberKind.FN_SUBSCRIBERS)

    @property
    def times_subscribers_notified(self) -> int:
        return self._registry.times_notified(SubscriberKind.SUBSCRIBERS)

    @property
    def times_subscribers_mut_notified(self) -> int:
        return self._registry.times_notified(SubscriberKind.SUBSCRIBERS_MUT)

    @property
    def times_fn_subscribers_notified(self) -> int:
        return self._registry.times_notified(SubscriberKind.FN_SUBSCRIBERS)

    def stats(self) -> dict[str, Any]:
        """Registration sizes and counters as a plain dict."""
        return {"config": self._config.to_dict(), **self._registry.snapshot()}


class Event(BaseEvent):
    """
    Observer-pattern event that notifies subscribers synchronously.

    Subscribers run on the calling thread, one at a time, in the order
    they were registered. The first exception stops the cycle and is
    surfaced to the caller.
    """

    def _dispatch(self, kind: SubscriberKind, members: tuple[Any, ...]) -> None:
        for member in members:
            invoke_member(kind, member)
