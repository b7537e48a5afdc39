from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

from editor_undo.events import Event

__all__ = [
    "Message",
    "UnknownChannelError",
    "Transport",
    "InMemoryTransport",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: transport
# Purpose: Relay history calls from a page context to the core context that
#          owns the history, preserving call order, and broadcast
#          notifications back to every observer.
# ==========================


@dataclass
class Message:
    """
    One call travelling over the transport.

    :param channel: Channel name the core side handles.
    :param args: Positional arguments for the handler.
    :param last_error: Optional last error message for diagnostics.
    """
    channel: str
    args: Tuple[Any, ...] = field(default_factory=tuple)
    last_error: Optional[str] = None


class UnknownChannelError(KeyError):
    """
    Raised when a synchronous request targets a channel nobody handles.
    """


class Transport(ABC):
    """
    Boundary between the page side (callers) and the core side (handlers).

    Fire-and-forget sends must reach their handlers in the order they were
    sent. A request is answered only after every earlier send was delivered.
    """

    def __init__(self) -> None:
        self.listeners = Event()

    @abstractmethod
    def send(self, channel: str, *args: Any) -> None:
        """
        Sends a fire-and-forget call.

        :param channel: Target channel.
        :param args: Call arguments.
        """

    @abstractmethod
    def request(self, channel: str, *args: Any) -> Any:
        """
        Sends a call and waits for its return value.

        :param channel: Target channel.
        :param args: Call arguments.
        :return: Whatever the handler returned.
        """

    @abstractmethod
    def handle(self, channel: str, fn: Optional[Callable[..., Any]]) -> None:
        """
        Installs the core-side handler for a channel (None removes it).

        :param channel: Channel name.
        :param fn: Handler receiving the call arguments.
        """

    def broadcast(self, channel: str, *args: Any) -> None:
        """
        Notifies every listener. Listeners receive `(channel, *args)`.

        :param channel: Notification channel.
        """
        self.listeners(channel, *args)


class InMemoryTransport(Transport):
    """
    Single-process transport backed by a FIFO queue.

    Sends are queued until `drain()` runs (or delivered at once with
    `auto_drain=True`). Messages nobody handles, or whose handler raises,
    are logged and kept in a bounded dead-letter list (oldest dropped first).

    :param name: Queue name used in logs.
    :param auto_drain: Deliver each message as soon as it is sent.
    :param dead_letter_limit: Maximum number of failed messages kept.
    """

    def __init__(self, name: str = "undo", auto_drain: bool = False,
                 dead_letter_limit: int = 100) -> None:
        super().__init__()
        self._name = name
        self._queue: Deque[Message] = deque()
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._dead_letter: Deque[Message] = deque(maxlen=max(1, dead_letter_limit))
        self._auto_drain = auto_drain

    @property
    def name(self) -> str:
        return self._name

    def handle(self, channel: str, fn: Optional[Callable[..., Any]]) -> None:
        if fn is None:
            self._handlers.pop(channel, None)
            return
        self._handlers[channel] = fn

    def send(self, channel: str, *args: Any) -> None:
        self._queue.append(Message(channel=channel, args=args))
        logger.debug("Enqueued %s to queue: %s", channel, self._name)
        if self._auto_drain:
            self.drain()

    def request(self, channel: str, *args: Any) -> Any:
        self.drain()
        try:
            fn = self._handlers[channel]
        except KeyError as exc:
            raise UnknownChannelError(channel) from exc
        return fn(*args)

    def poll_once(self) -> bool:
        """
        Delivers at most one queued message.

        :return: True if something was processed; False if queue was empty.
        """
        if not self._queue:
            return False
        msg = self._queue.popleft()

        fn = self._handlers.get(msg.channel)
        if fn is None:
            self._reject(msg, f"no handler for {msg.channel}")
            return True

        try:
            fn(*msg.args)
        except Exception as exc:  # pylint: disable=broad-except
            self._reject(msg, repr(exc))
        return True

    def _reject(self, msg: Message, error: str) -> None:
        msg.last_error = error
        self._dead_letter.append(msg)
        logger.error("Dead-lettered %s on %s: %s", msg.channel, self._name, error)

    def drain(self, max_steps: int = 10_000) -> int:
        """
        Delivers queued messages in order.

        :param max_steps: Safety cap to avoid infinite loops.
        :return: Number of messages processed.
        """
        processed = 0
        while processed < max_steps and self.poll_once():
            processed += 1
        return processed

    @property
    def pending(self) -> int:
        """
        :return: Number of messages waiting for delivery.
        """
        return len(self._queue)

    @property
    def dead_letter(self) -> List[Message]:
        """
        :return: Copy of the dead-lettered messages, oldest first.
        """
        return list(self._dead_letter)

    def clear_dead_letter(self) -> None:
        """Forgets every dead-lettered message."""
        self._dead_letter.clear()
