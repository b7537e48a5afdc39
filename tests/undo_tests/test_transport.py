import logging

import pytest
from editor_undo.transport import InMemoryTransport, UnknownChannelError


@pytest.mark.unit
def test_sends_are_delivered_in_order_on_drain():
    t = InMemoryTransport()
    seen = []
    t.handle("x", lambda *args: seen.append(("x",) + args))
    t.handle("y", lambda *args: seen.append(("y",) + args))
    t.send("x", 1)
    t.send("y")
    t.send("x", 2, 3)
    assert seen == []
    assert t.pending == 3

    assert t.drain() == 3
    assert seen == [("x", 1), ("y",), ("x", 2, 3)]
    assert t.pending == 0


@pytest.mark.unit
def test_auto_drain_delivers_immediately():
    t = InMemoryTransport(auto_drain=True)
    seen = []
    t.handle("x", seen.append)
    t.send("x", "now")
    assert seen == ["now"]


@pytest.mark.unit
def test_unhandled_and_failing_messages_are_dead_lettered(caplog):
    t = InMemoryTransport()
    seen = []

    def boom():
        raise RuntimeError("boom")

    t.handle("fail", boom)
    t.handle("ok", lambda: seen.append("ok"))
    t.send("nobody")
    t.send("fail")
    t.send("ok")
    with caplog.at_level(logging.ERROR, logger="editor_undo.transport"):
        processed = t.drain()
    assert processed == 3
    assert seen == ["ok"]
    assert [m.channel for m in t.dead_letter] == ["nobody", "fail"]
    assert "boom" in t.dead_letter[1].last_error
    assert "Dead-lettered nobody" in caplog.text


@pytest.mark.unit
def test_request_answers_after_earlier_sends():
    t = InMemoryTransport()
    state = {"n": 0}
    t.handle("inc", lambda: state.__setitem__("n", state["n"] + 1))
    t.handle("get", lambda: state["n"])
    t.send("inc")
    t.send("inc")
    assert t.request("get") == 2


@pytest.mark.unit
def test_request_on_unknown_channel_raises():
    t = InMemoryTransport()
    with pytest.raises(UnknownChannelError):
        t.request("nope")


@pytest.mark.unit
def test_handler_can_be_removed():
    t = InMemoryTransport()
    t.handle("x", lambda: None)
    t.handle("x", None)
    with pytest.raises(UnknownChannelError):
        t.request("x")


@pytest.mark.unit
def test_broadcast_reaches_every_listener():
    t = InMemoryTransport()
    got = []
    t.listeners.append(lambda channel, *args: got.append(("a", channel) + args))
    t.listeners.append(lambda channel, *args: got.append(("b", channel) + args))
    t.broadcast("undo:changed")
    assert got == [("a", "undo:changed"), ("b", "undo:changed")]


@pytest.mark.unit
def test_poll_once_on_empty_queue_returns_false():
    t = InMemoryTransport()
    assert t.poll_once() is False
    assert t.drain() == 0


@pytest.mark.unit
def test_dead_letter_keeps_only_newest_and_can_be_cleared():
    t = InMemoryTransport(name="page", dead_letter_limit=2)
    for n in range(5):
        t.send("nobody", n)
    assert t.drain() == 5
    assert [m.args for m in t.dead_letter] == [(3,), (4,)]
    assert t.name == "page"

    t.clear_dead_letter()
    assert t.dead_letter == []
