"""
Per-event notification policy.

An EventConfig answers two questions for every notify() call:

- which subscriber kinds are notified
- which subscriber collections are emptied afterwards

The configuration is fixed when the event is constructed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SubscriberKind(Enum):
    """The three subscriber collections an event owns."""

    SUBSCRIBERS = "subscribers"
    SUBSCRIBERS_MUT = "subscribers_mut"
    FN_SUBSCRIBERS = "fn_subscribers"


ALL_KINDS: tuple[SubscriberKind, ...] = (
    SubscriberKind.SUBSCRIBERS,
    SubscriberKind.SUBSCRIBERS_MUT,
    SubscriberKind.FN_SUBSCRIBERS,
)


def _parse_option(enum_cls, value: Any):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key in enum_cls.__members__:
            return enum_cls.__members__[key]
    # YAML reads a bare `none` as None
    if value is None and "NONE" in enum_cls.__members__:
        return enum_cls.__members__["NONE"]
    choices = ", ".join(name.lower() for name in enum_cls.__members__)
    raise ValueError(
        f"Invalid {enum_cls.__name__} value {value!r}; expected one of: {choices}"
    )


class SubscribersToNotify(Enum):
    """Which subscriber kinds notify() reaches."""

    ALL = "all"
    ONLY_SUBSCRIBERS = "only_subscribers"
    ONLY_SUBSCRIBERS_MUT = "only_subscribers_mut"
    ONLY_FN_SUBSCRIBERS = "only_fn_subscribers"

    def kinds(self) -> tuple[SubscriberKind, ...]:
        """Return the targeted kinds, in dispatch order."""
        return _NOTIFY_KINDS[self]

    @classmethod
    def parse(cls, value: Any) -> "SubscribersToNotify":
        return _parse_option(cls, value)


class ClearAfterNotification(Enum):
    """Which subscriber collections notify() empties once it is done."""

    ALL = "all"
    ONLY_SUBSCRIBERS = "only_subscribers"
    ONLY_SUBSCRIBERS_MUT = "only_subscribers_mut"
    ONLY_FUNC_SUBSCRIBERS = "only_func_subscribers"
    ONLY_FUNC_SUBSCRIBERS_MUT = "only_func_subscribers"  # alias
    NONE = "none"

    def kinds(self) -> tuple[SubscriberKind, ...]:
        """Return the collections to clear; empty for NONE."""
        return _CLEAR_KINDS[self]

    @classmethod
    def parse(cls, value: Any) -> "ClearAfterNotification":
        return _parse_option(cls, value)


_NOTIFY_KINDS = {
    SubscribersToNotify.ALL: ALL_KINDS,
    SubscribersToNotify.ONLY_SUBSCRIBERS: (SubscriberKind.SUBSCRIBERS,),
    SubscribersToNotify.ONLY_SUBSCRIBERS_MUT: (SubscriberKind.SUBSCRIBERS_MUT,),
    SubscribersToNotify.ONLY_FN_SUBSCRIBERS: (SubscriberKind.FN_SUBSCRIBERS,),
}

_CLEAR_KINDS = {
    ClearAfterNotification.ALL: ALL_KINDS,
    ClearAfterNotification.ONLY_SUBSCRIBERS: (SubscriberKind.SUBSCRIBERS,),
    ClearAfterNotification.ONLY_SUBSCRIBERS_MUT: (SubscriberKind.SUBSCRIBERS_MUT,),
    ClearAfterNotification.ONLY_FUNC_SUBSCRIBERS: (SubscriberKind.FN_SUBSCRIBERS,),
    ClearAfterNotification.NONE: (),
}


@dataclass(frozen=True)
class EventConfig:
    """
    Notification policy of a single event.

    The default notifies every kind and never clears registrations.
    """

    subscribers_to_notify: SubscribersToNotify = SubscribersToNotify.ALL
    clear_after_notification: ClearAfterNotification = ClearAfterNotification.NONE

    def __post_init__(self) -> None:
        # Accept option names as strings, e.g. from YAML
        object.__setattr__(
            self,
            "subscribers_to_notify",
            SubscribersToNotify.parse(self.subscribers_to_notify),
        )
        object.__setattr__(
            self,
            "clear_after_notification",
            ClearAfterNotification.parse(self.clear_after_notification),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "EventConfig":
        """
        Build a configuration from a plain mapping.

        Missing keys fall back to the defaults. Unknown keys are rejected
        so that typos in configuration files do not pass silently.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("Event configuration must be a mapping (dict)")

        unknown = set(data) - {"subscribers_to_notify", "clear_after_notification"}
        if unknown:
            raise ValueError(
                f"Unknown event configuration key(s): {', '.join(sorted(unknown))}"
            )

        kwargs = {}
        if "subscribers_to_notify" in data:
            kwargs["subscribers_to_notify"] = data["subscribers_to_notify"]
        if "clear_after_notification" in data:
            kwargs["clear_after_notification"] = data["clear_after_notification"]
        return cls(**kwargs)

    def to_dict(self) -> dict[str, str]:
        return {
            "subscribers_to_notify": self.subscribers_to_notify.value,
            "clear_after_notification": self.clear_after_notification.value,
        }


DEFAULT_CONFIG = EventConfig()
