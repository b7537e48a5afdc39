from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional

__all__ = [
    "Command",
    "CommandGroup",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: command
# Purpose: Reversible units of edit and the ordered batches that are
#          committed, undone and redone as a whole.
# ==========================


class Command:
    """
    Base class for one reversible edit.

    The edit has already been applied by the caller when the command is
    recorded, so construction never performs it. Concrete kinds override
    `undo()` and `redo()`; the defaults only log a warning so that a
    half-written kind degrades to a harmless no-op.

    :param info: Opaque payload describing the edit (shape defined by the kind).
    """

    def __init__(self, info: Any = None) -> None:
        self.info = info

    def undo(self) -> None:
        """
        Reverts the edit.
        """
        logger.warning("Please implement undo function in your command %s", type(self).__name__)

    def redo(self) -> None:
        """
        Re-applies the edit after an undo.
        """
        logger.warning("Please implement redo function in your command %s", type(self).__name__)

    def is_dirty(self) -> bool:
        """
        :return: True if this edit changes persisted content. Assumed dirty unless overridden.
        """
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.info!r})"


class CommandGroup:
    """
    Ordered batch of commands applied as one unit.

    Insertion order is apply order: `redo()` walks forward and `undo()` walks
    backward, because later commands may depend on state set up by earlier ones.

    :param description: Human-readable label shown in history views.
    :param items: Optional initial commands.
    """

    def __init__(self, description: str = "", items: Optional[List[Command]] = None) -> None:
        self.description = description
        self._commands: List[Command] = list(items) if items else []

    def add(self, cmd: Command) -> None:
        """
        Appends a command to the group.

        :param cmd: Command to add.
        """
        self._commands.append(cmd)

    def clear(self) -> None:
        """Drops every command; the group can no longer be committed."""
        self._commands = []

    def undo(self) -> None:
        """Undo each command in reverse order. No-op when empty."""
        for cmd in reversed(self._commands):
            cmd.undo()

    def redo(self) -> None:
        """Redo each command in insertion order."""
        for cmd in self._commands:
            cmd.redo()

    def is_dirty(self) -> bool:
        """
        :return: True as soon as one contained command reports dirty; False if empty.
        """
        return any(cmd.is_dirty() for cmd in self._commands)

    def can_commit(self) -> bool:
        """
        :return: True if the group holds at least one command.
        """
        return len(self._commands) > 0

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands))

    def __repr__(self) -> str:
        return f"CommandGroup(description={self.description!r}, commands={len(self._commands)})"
