from __future__ import annotations

import logging
from typing import Any, Mapping

from editor_undo.command import Command

__all__ = ["SetPropertyCommand"]

logger = logging.getLogger(__name__)


# ==========================
# Module: commands
# Purpose: Ready-made command kinds shared by editors (property inspectors).
# ==========================


class SetPropertyCommand(Command):
    """
    Records an attribute change on a target object.

    Compensation restores the previous value; redo writes the new one again.

    :param info: Mapping with keys `target`, `name`, `old` and `new`.
    """

    def __init__(self, info: Mapping[str, Any]) -> None:
        super().__init__(info)
        self._target = info["target"]
        self._name: str = info["name"]
        self._old = info.get("old")
        self._new = info.get("new")

    def undo(self) -> None:
        """Write back the value held before the edit."""
        setattr(self._target, self._name, self._old)

    def redo(self) -> None:
        """Write the edited value again."""
        setattr(self._target, self._name, self._new)

    def is_dirty(self) -> bool:
        """An edit that kept the same value changes nothing worth saving."""
        return self._old != self._new

    def __repr__(self) -> str:
        return f"SetPropertyCommand({self._name}: {self._old!r} -> {self._new!r})"
