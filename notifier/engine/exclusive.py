"""
Exclusive-access cell for mutable subscribers.

A cell wraps one subscriber instance. Readers may share it; a writer must
have it alone. Instead of waiting for a conflicting holder, the cell
raises ExclusiveAccessError, so re-entrant notification or a read borrow
held across notify() shows up as an error rather than a deadlock.
"""

import threading
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from notifier.engine.errors import ExclusiveAccessError

T = TypeVar("T")


class ExclusiveCell(Generic[T]):
    """
    Shared handle around a value with checked read/write borrows.

    The cell itself is the identity used by the registry, so two cells
    around equal values are still different subscribers.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._readers: int = 0
        self._writer: bool = False
        # Guards the borrow counters only; never held while user code runs.
        self._state_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ExclusiveCell({self._value!r})"

    @property
    def value_type(self) -> type:
        """Type of the wrapped value. Does not borrow."""
        return type(self._value)

    @property
    def is_borrowed(self) -> bool:
        """True while at least one read borrow is active."""
        return self._readers > 0

    @property
    def is_mut_borrowed(self) -> bool:
        """True while the exclusive borrow is active."""
        return self._writer

    def _describe(self) -> str:
        # Does not call the value's __repr__, which may borrow this cell
        return f"ExclusiveCell({type(self._value).__name__} at {id(self._value):#x})"

    @contextmanager
    def borrow(self) -> Iterator[T]:
        """
        Borrow the value for reading.

        Raises:
            ExclusiveAccessError: if the value is currently borrowed mutably
        """
        with self._state_lock:
            conflict = self._writer
            if not conflict:
                self._readers += 1
        if conflict:
            raise ExclusiveAccessError(f"{self._describe()} is already mutably borrowed")
        try:
            yield self._value
        finally:
            with self._state_lock:
                self._readers -= 1

    @contextmanager
    def borrow_mut(self) -> Iterator[T]:
        """
        Borrow the value exclusively.

        Raises:
            ExclusiveAccessError: if any other borrow is active
        """
        with self._state_lock:
            writer, readers = self._writer, self._readers
            if not writer and not readers:
                self._writer = True
        if writer:
            raise ExclusiveAccessError(f"{self._describe()} is already mutably borrowed")
        if readers:
            raise ExclusiveAccessError(
                f"{self._describe()} is already borrowed by {readers} reader(s)"
            )
        try:
            yield self._value
        finally:
            with self._state_lock:
                self._writer = False
