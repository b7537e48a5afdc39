"""
client.py: the history interface editors talk to.

An editor never reaches into a shared, process-wide history. It is handed a
`HistoryClient` owned by its session and calls the same operations whether
the history lives in the current process (`LocalHistoryClient`) or behind a
transport in the core process (`RemoteHistoryClient`).

Usage:
    history = connect(ProcessLevel.CORE, undo_list=UndoList())
    history.register("move", MoveCommand)
    history.add("move", {"from": 0, "to": 5})
    history.commit("move item")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from editor_undo.config import Channels
from editor_undo.events import Event
from editor_undo.transport import Transport
from editor_undo.undo_list import CommandFactory, UndoList

__all__ = [
    "ProcessLevel",
    "HistoryClient",
    "LocalHistoryClient",
    "RemoteHistoryClient",
    "connect",
    "local",
]

logger = logging.getLogger(__name__)


class ProcessLevel(Enum):
    """Execution context a client is created in."""
    CORE = auto()
    PAGE = auto()


class HistoryClient(ABC):
    """
    Operations an editor can perform on its undo history.

    :ivar changed: Fired with no arguments after the history changed.
    """

    changed: Event

    @abstractmethod
    def register(self, command_id: str, factory: CommandFactory) -> None:
        """Registers the factory for a command kind."""

    @abstractmethod
    def add(self, command_id: str, info: Any = None) -> None:
        """Records an already applied edit in the pending group."""

    @abstractmethod
    def commit(self, description: str = "") -> None:
        """Seals the pending group onto the history."""

    @abstractmethod
    def undo(self) -> None:
        """Reverts pending edits, or steps back one group."""

    @abstractmethod
    def redo(self) -> None:
        """Steps forward one group."""

    @abstractmethod
    def save(self) -> None:
        """Marks the current state as saved."""

    @abstractmethod
    def clear(self) -> None:
        """Drops the history, keeping registrations."""

    @abstractmethod
    def reset(self) -> None:
        """Drops the history and every registration."""

    @abstractmethod
    def dirty(self) -> bool:
        """
        :return: True if there are unsaved changes.
        """


class LocalHistoryClient(HistoryClient):
    """
    Calls straight into an UndoList living in this process.

    :param undo_list: History to operate on.
    """

    def __init__(self, undo_list: UndoList) -> None:
        self._undo_list = undo_list
        self.changed = undo_list.changed

    @property
    def undo_list(self) -> UndoList:
        return self._undo_list

    def register(self, command_id: str, factory: CommandFactory) -> None:
        self._undo_list.register(command_id, factory)

    def add(self, command_id: str, info: Any = None) -> None:
        self._undo_list.add(command_id, info)

    def commit(self, description: str = "") -> None:
        self._undo_list.commit(description)

    def undo(self) -> None:
        self._undo_list.undo()

    def redo(self) -> None:
        self._undo_list.redo()

    def save(self) -> None:
        self._undo_list.save()

    def clear(self) -> None:
        self._undo_list.clear()

    def reset(self) -> None:
        self._undo_list.reset()

    def dirty(self) -> bool:
        return self._undo_list.dirty()


class RemoteHistoryClient(HistoryClient):
    """
    Forwards calls over a transport to the core that owns the history.

    Every call except `dirty()` is fire-and-forget; the transport keeps them
    in call order. `dirty()` waits for the answer.

    :param transport: Transport connected to a HistoryHost.
    :param channels: Channel names; must match the host's.
    """

    def __init__(self, transport: Transport, channels: Optional[Channels] = None) -> None:
        self._transport = transport
        self._channels = channels or Channels()
        self.changed = Event()
        transport.listeners.append(self._on_broadcast)

    def _on_broadcast(self, channel: str, *args: Any) -> None:
        if channel == self._channels.changed:
            self.changed()

    def register(self, command_id: str, factory: CommandFactory) -> None:
        # factories can not travel over the transport
        logger.error("Can not register undo command %s from a page, register it in the core", command_id)

    def add(self, command_id: str, info: Any = None) -> None:
        self._transport.send(self._channels.add, command_id, info)

    def commit(self, description: str = "") -> None:
        self._transport.send(self._channels.commit, description)

    def undo(self) -> None:
        self._transport.send(self._channels.perform_undo)

    def redo(self) -> None:
        self._transport.send(self._channels.perform_redo)

    def save(self) -> None:
        self._transport.send(self._channels.save)

    def clear(self) -> None:
        self._transport.send(self._channels.clear)

    def reset(self) -> None:
        self._transport.send(self._channels.reset)

    def dirty(self) -> bool:
        return bool(self._transport.request(self._channels.is_dirty))

    def close(self) -> None:
        """Stops listening for broadcasts."""
        self._transport.listeners.remove(self._on_broadcast)


def connect(level: ProcessLevel, undo_list: Optional[UndoList] = None,
            transport: Optional[Transport] = None,
            channels: Optional[Channels] = None) -> HistoryClient:
    """
    Builds the client matching the execution context.

    :param level: CORE to operate on `undo_list` directly, PAGE to go through `transport`.
    :param undo_list: History owned by the caller's session (CORE).
    :param transport: Transport connected to a HistoryHost (PAGE).
    :param channels: Channel names for PAGE clients.
    :return: A HistoryClient.
    :raises ValueError: If the collaborator required by `level` is missing.
    """
    if level is ProcessLevel.CORE:
        if undo_list is None:
            raise ValueError("A core-level history client needs an UndoList.")
        return LocalHistoryClient(undo_list)
    if transport is None:
        raise ValueError("A page-level history client needs a transport.")
    return RemoteHistoryClient(transport, channels)


def local() -> UndoList:
    """
    :return: A fresh UndoList sharing nothing with any other history (sub-editors, dialogs).
    """
    return UndoList()
