"""
Drill runner for the notifier engine.

A drill is a YAML file describing a handful of events, how many
subscribers of each kind they get and how many times they are fired.
Running it exercises the real engine with counting subscribers and
reports what happened.

Responsibilities:

- Load a drill definition from YAML and validate its structure
- Build Event / EventAsync instances from the per-event configuration
- Fire each event the requested number of times
- Report counters and remaining registrations
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List

import yaml

from notifier.engine.config import EventConfig
from notifier.engine.event import BaseEvent, Event
from notifier.engine.event_async import EventAsync
from notifier.subscriber import (
    SubscriberAsync,
    SubscriberAsyncMut,
    into_mut_subscriber,
)

logger = logging.getLogger(__name__)

MODES = ("sync", "async")
COUNT_KEYS = ("subscribers", "subscribers_mut", "fn_subscribers")
EVENT_KEYS = {
    "mode",
    "subscribers_to_notify",
    "clear_after_notification",
    "max_workers",
    "rounds",
    *COUNT_KEYS,
}


class CallTally:
    """Thread-safe invocation counter shared by the drill subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.calls = 0

    def hit(self) -> None:
        with self._lock:
            self.calls += 1


class CountingSubscriber(SubscriberAsync):
    def __init__(self, tally: CallTally) -> None:
        self.tally = tally

    def update(self) -> None:
        self.tally.hit()


class AccumulatingSubscriber(SubscriberAsyncMut):
    """Mutating subscriber whose state grows by `step` on every call."""

    def __init__(self, tally: CallTally, state: int = 0, step: int = 1) -> None:
        self.tally = tally
        self.state = state
        self.step = step

    def update_mut(self) -> None:
        self.state += self.step
        self.tally.hit()


class DrillRunner:
    """
    Executes one drill file against freshly built events.
    """

    def __init__(self, drill_path: Path) -> None:
        self.drill_path = drill_path
        self.drill: Dict[str, Any] = {}
        self.events: Dict[str, BaseEvent] = {}

    def load(self) -> None:
        """
        Load the drill YAML from disk and validate structure.
        """
        with self.drill_path.open("r", encoding="utf-8") as fh:
            self.drill = yaml.safe_load(fh)

        if not isinstance(self.drill, dict):
            raise ValueError("Drill file must be a YAML mapping (dict)")

        if "events" not in self.drill:
            raise ValueError("Drill is missing an 'events' section")

        events = self.drill["events"]
        if not isinstance(events, dict) or not events:
            raise ValueError("'events' must be a non-empty mapping of event names")

        for name, entry in events.items():
            self._validate_event(str(name), entry if entry is not None else {})

    @staticmethod
    def _validate_event(name: str, entry: Any) -> None:
        if not isinstance(entry, dict):
            raise ValueError(f"Event '{name}' must be a mapping")

        unknown = set(entry) - EVENT_KEYS
        if unknown:
            raise ValueError(
                f"Event '{name}' has unknown key(s): {', '.join(sorted(unknown))}"
            )

        mode = entry.get("mode", "sync")
        if mode not in MODES:
            raise ValueError(f"Event '{name}' has invalid mode {mode!r}")

        for key in (*COUNT_KEYS, "rounds"):
            value = entry.get(key, 0)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"Event '{name}': '{key}' must be a non-negative integer")

        max_workers = entry.get("max_workers")
        if max_workers is not None:
            if mode != "async":
                raise ValueError(f"Event '{name}': 'max_workers' requires mode 'async'")
            if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
                raise ValueError(f"Event '{name}': 'max_workers' must be a positive integer")

        # Raises ValueError for unknown option names
        EventConfig.from_mapping(
            {
                key: entry[key]
                for key in ("subscribers_to_notify", "clear_after_notification")
                if key in entry
            }
        )

    def build_event(self, entry: Dict[str, Any]) -> BaseEvent:
        """Create the event described by one drill entry."""
        config = EventConfig.from_mapping(
            {
                key: entry[key]
                for key in ("subscribers_to_notify", "clear_after_notification")
                if key in entry
            }
        )
        if entry.get("mode", "sync") == "async":
            return EventAsync(config, max_workers=entry.get("max_workers"))
        return Event(config)

    def run(self) -> List[Dict[str, Any]]:
        """
        Run every event of the drill and return one report per event.
        """
        reports: List[Dict[str, Any]] = []

        for name, entry in self.drill.get("events", {}).items():
            entry = entry or {}
            event = self.build_event(entry)
            self.events[str(name)] = event

            tally = CallTally()
            for _ in range(entry.get("subscribers", 0)):
                event.subscribe(CountingSubscriber(tally))
            mut_subscribers = [
                AccumulatingSubscriber(tally) for _ in range(entry.get("subscribers_mut", 0))
            ]
            for subscriber in mut_subscribers:
                event.subscribe_mut(into_mut_subscriber(subscriber))
            for _ in range(entry.get("fn_subscribers", 0)):
                event.subscribe_as_fn(tally.hit)

            rounds = entry.get("rounds", 1)
            logger.info("Running event '%s' for %d round(s)", name, rounds)
            for _ in range(rounds):
                event.notify()

            reports.append(
                {
                    "drill_id": self.drill.get("id"),
                    "event": str(name),
                    "mode": entry.get("mode", "sync"),
                    "rounds": rounds,
                    "invocations": tally.calls,
                    "mut_states": [subscriber.state for subscriber in mut_subscribers],
                    **event.stats(),
                }
            )

        return reports
