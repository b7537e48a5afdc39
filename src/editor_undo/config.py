from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Channels"]


@dataclass(frozen=True)
class Channels:
    """
    Message channel names used between a page and the core holding the history.

    :param prefix: Namespace prepended to every channel (`<prefix>:<name>`).
    """
    prefix: str = "undo"

    def _channel(self, name: str) -> str:
        return f"{self.prefix}:{name}"

    @property
    def perform_undo(self) -> str:
        return self._channel("perform-undo")

    @property
    def perform_redo(self) -> str:
        return self._channel("perform-redo")

    @property
    def add(self) -> str:
        return self._channel("add")

    @property
    def commit(self) -> str:
        return self._channel("commit")

    @property
    def save(self) -> str:
        return self._channel("save")

    @property
    def clear(self) -> str:
        return self._channel("clear")

    @property
    def reset(self) -> str:
        return self._channel("reset")

    @property
    def is_dirty(self) -> str:
        return self._channel("is-dirty")

    @property
    def changed(self) -> str:
        """Broadcast sent to every observer after the history changed."""
        return self._channel("changed")
