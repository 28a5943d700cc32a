"""Refresh listener registry."""

import threading
from typing import Callable, Tuple

RefreshListener = Callable[[], None]


class ListenerRegistry:
    """
    Append-only set of refresh listeners.

    Registration swaps in a new tuple, so a notification pass always iterates
    the listeners that were registered when it started.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: Tuple[RefreshListener, ...] = ()

    def add(self, listener: RefreshListener) -> None:
        """Register a listener; it is kept for the registry's lifetime."""
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        with self._lock:
            self._listeners = self._listeners + (listener,)

    def notify_refresh(self) -> None:
        """
        Call every listener in registration order.

        An exception from a listener propagates and skips the listeners
        after it.
        """
        for listener in self._listeners:
            listener()

    def __len__(self) -> int:
        return len(self._listeners)
