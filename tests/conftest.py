"""Test configuration and fixtures."""

import logging
import sys
import threading
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from notifier.subscriber import SubscriberAsync, SubscriberAsyncMut  # noqa: E402


class RecordingSubscriber(SubscriberAsync):
    """Read-only subscriber that records every call into a shared log."""

    def __init__(self, name: str, log: list | None = None):
        self.name = name
        self.log = log if log is not None else []
        self.calls = 0
        self._lock = threading.Lock()

    def update(self):
        with self._lock:
            self.calls += 1
            self.log.append(self.name)


class AdderSubscriber(SubscriberAsyncMut):
    """Mutating subscriber: state += step on every update_mut()."""

    def __init__(self, state: int = 10, step: int = 10):
        self.state = state
        self.step = step

    def update_mut(self):
        self.state += self.step


class EqualToEverything:
    """Subscriber whose __eq__ always says yes, to catch equality lookups."""

    def __init__(self):
        self.calls = 0

    def __eq__(self, other):
        return True

    def __hash__(self):
        return 0

    def update(self):
        self.calls += 1


@pytest.fixture
def call_log() -> list:
    return []


@pytest.fixture
def make_subscriber(call_log):
    """Factory for RecordingSubscriber instances sharing one call log."""

    def factory(name: str = "sub") -> RecordingSubscriber:
        return RecordingSubscriber(name, call_log)

    return factory


@pytest.fixture
def adder() -> AdderSubscriber:
    return AdderSubscriber(state=10, step=10)


@pytest.fixture
def make_adder():
    def factory(state: int = 10, step: int = 10) -> AdderSubscriber:
        return AdderSubscriber(state=state, step=step)

    return factory


@pytest.fixture
def make_equal_subscriber():
    return EqualToEverything


@pytest.fixture
def drill_file(tmp_path):
    """Write a drill YAML and return its path."""

    def write(content: str, name: str = "drill.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return write


@pytest.fixture
def reset_root_logger():
    """Undo setup_logging() so handlers do not leak between tests."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
