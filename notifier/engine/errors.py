"""
Exceptions raised by the notification engine.

Every failure here is fatal for the operation that raised it. Nothing in
the engine catches these, retries, or converts them into return values.
"""


class NotifierError(Exception):
    """Base class for all notifier errors."""


class SubscriberNotFoundError(NotifierError, LookupError):
    """
    Raised when unsubscribing a handle that is not registered.

    Removing something that was never added is treated as a programming
    error on the caller's side.
    """

    def __init__(self, handle: object, collection: str) -> None:
        self.handle = handle
        self.collection = collection
        super().__init__(
            f"The provided handle {handle!r} could not be found in the list of "
            f"{collection}"
        )


class ExclusiveAccessError(NotifierError, RuntimeError):
    """
    Raised when exclusive access to a mutable subscriber cannot be obtained.

    This is a correctness check, not a lock: the caller never waits for
    the current holder to release the subscriber.
    """
