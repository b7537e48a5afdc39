from __future__ import annotations

import logging
from typing import Optional

from editor_undo.config import Channels
from editor_undo.transport import Transport
from editor_undo.undo_list import UndoList

__all__ = ["HistoryHost"]

logger = logging.getLogger(__name__)


class HistoryHost:
    """
    Core-side end of the transport: serves one UndoList to remote clients.

    Installs a handler per history call and rebroadcasts `channels.changed`
    to every listener each time the list reports a change.

    :param undo_list: History being served.
    :param transport: Transport the page side sends calls over.
    :param channels: Channel names; defaults to the `undo:` namespace.
    """

    def __init__(self, undo_list: UndoList, transport: Transport,
                 channels: Optional[Channels] = None) -> None:
        self._undo_list = undo_list
        self._transport = transport
        self._channels = channels or Channels()

        ch = self._channels
        self._routes = {
            ch.perform_undo: undo_list.undo,
            ch.perform_redo: undo_list.redo,
            ch.add: undo_list.add,
            ch.commit: undo_list.commit,
            ch.save: undo_list.save,
            ch.clear: undo_list.clear,
            ch.reset: undo_list.reset,
            ch.is_dirty: undo_list.dirty,
        }
        for channel, fn in self._routes.items():
            transport.handle(channel, fn)
        undo_list.changed.append(self._on_changed)
        logger.debug("Serving undo history on %s:*", ch.prefix)

    @property
    def undo_list(self) -> UndoList:
        return self._undo_list

    def _on_changed(self) -> None:
        self._transport.broadcast(self._channels.changed)

    def close(self) -> None:
        """Stops serving: removes the handlers and the change subscription."""
        for channel in self._routes:
            self._transport.handle(channel, None)
        self._undo_list.changed.remove(self._on_changed)
