"""
notifier: observer-pattern events for Python.

The engine provides:
- Event: notifies subscribers synchronously, in registration order
- EventAsync: notifies subscribers concurrently behind a join barrier
- EventConfig: which subscriber kinds to notify and what to clear after
- ExclusiveCell: checked exclusive access for mutating subscribers

Subscribers implement update() (read-only), update_mut() (mutating,
registered through into_mut_subscriber()) or are plain callables.
"""

from notifier.engine.config import (
    ClearAfterNotification,
    EventConfig,
    SubscriberKind,
    SubscribersToNotify,
)
from notifier.engine.errors import (
    ExclusiveAccessError,
    NotifierError,
    SubscriberNotFoundError,
)
from notifier.engine.event import Event
from notifier.engine.event_async import EventAsync
from notifier.engine.exclusive import ExclusiveCell
from notifier.subscriber import (
    Subscriber,
    SubscriberAsync,
    SubscriberAsyncMut,
    SubscriberMut,
    into_mut_subscriber,
    into_subscriber,
)
from notifier.triggers import event_triggers

__all__ = [
    "ClearAfterNotification",
    "Event",
    "EventAsync",
    "EventConfig",
    "ExclusiveAccessError",
    "ExclusiveCell",
    "NotifierError",
    "Subscriber",
    "SubscriberAsync",
    "SubscriberAsyncMut",
    "SubscriberKind",
    "SubscriberMut",
    "SubscriberNotFoundError",
    "SubscribersToNotify",
    "event_triggers",
    "into_mut_subscriber",
    "into_subscriber",
]
