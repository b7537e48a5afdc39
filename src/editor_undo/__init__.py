"""
editor_undo: undo/redo command history for editors.

Edits are recorded as commands, grouped into atomic units on commit and
traversed with undo/redo. Page contexts reach the core's history through a
transport-backed client.
"""

from editor_undo.client import (
    HistoryClient,
    LocalHistoryClient,
    ProcessLevel,
    RemoteHistoryClient,
    connect,
    local,
)
from editor_undo.command import Command, CommandGroup
from editor_undo.commands import SetPropertyCommand
from editor_undo.config import Channels
from editor_undo.events import Event
from editor_undo.host import HistoryHost
from editor_undo.transport import InMemoryTransport, Transport
from editor_undo.undo_list import UndoList, UnregisteredCommandError

__all__ = [
    "Channels",
    "Command",
    "CommandGroup",
    "Event",
    "HistoryClient",
    "HistoryHost",
    "InMemoryTransport",
    "LocalHistoryClient",
    "ProcessLevel",
    "RemoteHistoryClient",
    "SetPropertyCommand",
    "Transport",
    "UndoList",
    "UnregisteredCommandError",
    "connect",
    "local",
]
