"""
Observer lists for tag notifications.

Each Observers instance is one notification channel (e.g. "tag_added").
Callbacks run synchronously, in subscription order, inside the call that
caused the change.
"""

from typing import Callable, Generic, List, TypeVar

from tag_system.utils.logging_config import get_logger

logger = get_logger("events")

T = TypeVar("T")


class Observers(Generic[T]):
    """
    A named list of callbacks with synchronous fan-out.

    Usage:
        added = Observers("tag_added")
        added.subscribe(lambda tag: print(tag.name))
        added.notify(tag)
    """

    def __init__(self, name: str):
        self.name = name
        self._callbacks: List[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[T], None]:
        """
        Register a callback. Subscribing the same callback twice is a no-op.

        Returns the callback so this can be used as a decorator.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[[T], None]) -> bool:
        """Remove a callback. Returns False if it was not subscribed."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)
            return True
        return False

    def notify(self, payload: T) -> None:
        """
        Deliver payload to every subscriber.

        A failing callback is logged and skipped; the remaining
        subscribers still receive the payload.
        """
        # Snapshot so callbacks may (un)subscribe while being notified
        for callback in list(self._callbacks):
            try:
                callback(payload)
            except Exception as e:
                logger.error(
                    f"Observer for '{self.name}' failed: {e}",
                    exc_info=True
                )

    def clear(self) -> None:
        self._callbacks.clear()

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Observers({self.name!r}, subscribers={len(self._callbacks)})"
