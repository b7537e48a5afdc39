from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple

from editor_undo.command import Command, CommandGroup
from editor_undo.events import Event

__all__ = [
    "CommandFactory",
    "UnregisteredCommandError",
    "UndoList",
]

logger = logging.getLogger(__name__)

CommandFactory = Callable[[Any], Command]


# ==========================
# Module: undo_list
# Purpose: Linear edit history. Edits accumulate in a pending group, are
#          sealed onto the stack by commit() and traversed with undo()/redo()
#          through a position cursor.
# ==========================


class UnregisteredCommandError(KeyError):
    """
    Raised when a command kind is looked up before it was registered.
    """

    def __init__(self, command_id: str) -> None:
        super().__init__(command_id)
        self.command_id = command_id

    def __str__(self) -> str:
        return f"Can not find undo command {self.command_id}, please register it first"


class UndoList:
    """
    History stack of committed command groups.

    `position` is the index of the last applied group, -1 when nothing was
    committed. `save_position` is the position recorded by the last `save()`.
    Every mutating call fires `changed` with no arguments once it is done.

    Observed quirks kept as-is:
      - `undo()` never moves the cursor below 0, and stepping back from
        position p reverts groups[p - 1], so the newest committed group is
        never reverted through the stack;
      - `redo()` from position -1 jumps straight to index 1.
    """

    def __init__(self) -> None:
        self._registry: Dict[str, CommandFactory] = {}
        self._pending = CommandGroup()
        self._groups: List[CommandGroup] = []
        self._position = -1
        self._save_position = -1
        self.changed = Event()

    # ----------------------------
    # Registry
    # ----------------------------

    def register(self, command_id: str, factory: CommandFactory) -> None:
        """
        Registers (or overwrites) the factory building commands of a kind.

        :param command_id: Kind identifier used by `add()`.
        :param factory: Callable taking the `info` payload and returning a Command.
        """
        if command_id in self._registry:
            logger.debug("Overwriting undo command %s", command_id)
        self._registry[command_id] = factory

    def unregister(self, command_id: str) -> None:
        """
        Removes one kind. Unknown ids are ignored.

        :param command_id: Kind identifier.
        """
        self._registry.pop(command_id, None)

    def registered(self, command_id: str) -> bool:
        """
        :return: True if a factory is registered for `command_id`.
        """
        return command_id in self._registry

    def _factory(self, command_id: str) -> CommandFactory:
        try:
            return self._registry[command_id]
        except KeyError as exc:
            raise UnregisteredCommandError(command_id) from exc

    # ----------------------------
    # State
    # ----------------------------

    @property
    def position(self) -> int:
        return self._position

    @property
    def save_position(self) -> int:
        return self._save_position

    @property
    def groups(self) -> Tuple[CommandGroup, ...]:
        """
        :return: Snapshot of the committed groups, oldest first.
        """
        return tuple(self._groups)

    @property
    def pending(self) -> CommandGroup:
        """
        :return: The group collecting edits not yet committed.
        """
        return self._pending

    # ----------------------------
    # Operations
    # ----------------------------

    def add(self, command_id: str, info: Any = None) -> None:
        """
        Records an edit the caller has already applied into the pending group.

        An unregistered `command_id`, or a factory that raises, is logged and
        ignored without touching the history. Recording a new edit
        while redo history exists discards that redo history first.

        :param command_id: Registered kind identifier.
        :param info: Payload passed to the kind's factory.
        """
        try:
            factory = self._factory(command_id)
        except UnregisteredCommandError as exc:
            logger.error("%s", exc)
            return

        try:
            cmd = factory(info)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Can not create undo command %s: %r", command_id, exc)
            return

        self._clear_redo()
        self._pending.add(cmd)
        logger.debug("Added undo command %s to pending group (%d)", command_id, len(self._pending))
        self._changed()

    def commit(self, description: str = "") -> None:
        """
        Seals the pending group onto the history. Empty groups are dropped.

        :param description: Human-readable label for the group.
        """
        if self._pending.can_commit():
            self._pending.description = description or ""
            self._groups.append(self._pending)
            self._position += 1
            logger.debug("Committed '%s' at position %d", self._pending.description, self._position)
            self._changed()
        self._pending = CommandGroup()

    def undo(self) -> None:
        """
        Reverts uncommitted edits if there are any, otherwise steps the cursor back.
        """
        if self._pending.can_commit():
            self._pending.undo()
            self._pending.clear()
            self._changed()
            return

        if self._position <= 0:
            logger.debug("Nothing to undo at position %d", self._position)
            return

        self._position -= 1
        self._groups[self._position].undo()
        self._changed()

    def redo(self) -> None:
        """
        Steps the cursor forward and re-applies the group it lands on.
        """
        target = self._position + 1
        # index 0 is the baseline and is never re-applied
        if target == 0:
            target += 1
        if target >= len(self._groups):
            logger.debug("Nothing to redo at position %d", self._position)
            return

        self._position = target
        self._groups[self._position].redo()
        self._changed()

    def save(self) -> None:
        """Marks the current position as the saved state."""
        self._save_position = self._position
        self._changed()

    def clear(self) -> None:
        """Drops all history and pending edits. Registrations are kept."""
        self._pending = CommandGroup()
        self._groups = []
        self._position = -1
        self._save_position = -1
        self._changed()

    def reset(self) -> None:
        """Clears history and unregisters every command kind."""
        self._registry = {}
        self.clear()

    def dirty(self) -> bool:
        """
        :return: True if a dirty group lies between the save point and the current position.
        """
        if self._save_position == self._position:
            return False

        lo = min(self._position, self._save_position)
        hi = max(self._position, self._save_position)
        for i in range(lo + 1, hi + 1):
            # save point was truncated away together with its redo history
            if i >= len(self._groups):
                return True
            if self._groups[i].is_dirty():
                return True
        return False

    # ----------------------------
    # Internals
    # ----------------------------

    def _clear_redo(self) -> None:
        if self._position + 1 == len(self._groups):
            return

        logger.debug("Discarding %d redo group(s)", len(self._groups) - self._position - 1)
        self._groups = self._groups[: self._position + 1]
        self._pending.clear()

    def _changed(self) -> None:
        self.changed()

    def __repr__(self) -> str:
        return (f"UndoList(position={self._position}, save_position={self._save_position}, "
                f"groups={len(self._groups)}, pending={len(self._pending)})")
