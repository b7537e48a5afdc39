"""
events.py: synchronous in-process notification used for "history changed".

Subscribers are plain callables. Dispatch happens in registration order and
runs to completion before the notifying call returns.
"""

from __future__ import annotations

from typing import Any, Callable, List

__all__ = ["Event"]


class Event:
    """
    Simple synchronous pub-sub list with call semantics.

    Usage:
        event.append(handler)
        event()               # dispatches to all subscribers in order
        event.remove(handler)
    """

    def __init__(self) -> None:
        self._subscribers: List[Callable[..., None]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        """Dispatches the event to all subscribers in registration order."""
        for fn in list(self._subscribers):
            fn(*args, **kwargs)

    def append(self, fn: Callable[..., None]) -> None:
        """Registers a handler."""
        self._subscribers.append(fn)

    def remove(self, fn: Callable[..., None]) -> None:
        """Unregisters a handler if present."""
        try:
            self._subscribers.remove(fn)
        except ValueError:
            pass  # idempotent remove

    def __len__(self) -> int:
        return len(self._subscribers)
