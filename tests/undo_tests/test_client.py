import logging

import pytest
from editor_undo.client import LocalHistoryClient, ProcessLevel, RemoteHistoryClient, connect
from editor_undo.command import Command
from editor_undo.config import Channels
from editor_undo.host import HistoryHost
from editor_undo.transport import InMemoryTransport
from editor_undo.undo_list import UndoList


class Doc:
    def __init__(self):
        self.value = 0


class SetValue(Command):
    def undo(self): self.info["doc"].value = self.info["old"]
    def redo(self): self.info["doc"].value = self.info["new"]


def edit(client, doc, new):
    old = doc.value
    doc.value = new
    client.add("set", {"doc": doc, "old": old, "new": new})


def make_core(channels=None):
    undo_list = UndoList()
    undo_list.register("set", SetValue)
    transport = InMemoryTransport()
    host = HistoryHost(undo_list, transport, channels)
    return undo_list, transport, host


@pytest.mark.unit
def test_channel_names_follow_prefix():
    ch = Channels()
    assert ch.perform_undo == "undo:perform-undo"
    assert ch.is_dirty == "undo:is-dirty"
    assert ch.changed == "undo:changed"
    assert Channels("scene").commit == "scene:commit"


@pytest.mark.unit
def test_connect_picks_client_for_process_level():
    undo_list = UndoList()
    assert isinstance(connect(ProcessLevel.CORE, undo_list=undo_list), LocalHistoryClient)
    assert isinstance(connect(ProcessLevel.PAGE, transport=InMemoryTransport()), RemoteHistoryClient)
    with pytest.raises(ValueError):
        connect(ProcessLevel.CORE)
    with pytest.raises(ValueError):
        connect(ProcessLevel.PAGE)


@pytest.mark.unit
def test_local_client_calls_through():
    undo_list = UndoList()
    client = connect(ProcessLevel.CORE, undo_list=undo_list)
    assert client.changed is undo_list.changed
    doc = Doc()
    client.register("set", SetValue)
    edit(client, doc, 1)
    client.commit("one")
    edit(client, doc, 2)
    client.commit("two")
    assert client.dirty() is True
    client.save()
    assert client.dirty() is False
    client.undo()
    assert (undo_list.position, doc.value) == (0, 0)
    client.redo()
    assert (undo_list.position, doc.value) == (1, 2)
    client.clear()
    assert undo_list.groups == ()
    client.reset()
    assert undo_list.registered("set") is False


@pytest.mark.unit
def test_remote_calls_apply_in_order_and_dirty_is_synchronous():
    undo_list, transport, _ = make_core()
    page = RemoteHistoryClient(transport)
    doc = Doc()

    edit(page, doc, 1)
    page.commit("one")
    edit(page, doc, 2)
    page.commit("two")
    assert transport.pending == 4
    assert undo_list.position == -1

    assert page.dirty() is True
    assert undo_list.position == 1
    assert [g.description for g in undo_list.groups] == ["one", "two"]

    page.save()
    page.undo()
    assert page.dirty() is True
    assert doc.value == 0

    page.redo()
    assert page.dirty() is False
    assert doc.value == 2

    page.clear()
    assert page.dirty() is False
    assert undo_list.groups == ()


@pytest.mark.unit
def test_remote_client_hears_changed_broadcast():
    undo_list, transport, _ = make_core()
    page = RemoteHistoryClient(transport)
    other = RemoteHistoryClient(transport)
    heard = []
    page.changed.append(lambda: heard.append("page"))
    other.changed.append(lambda: heard.append("other"))

    edit(page, Doc(), 1)
    page.commit("one")
    transport.drain()
    assert heard == ["page", "other", "page", "other"]

    other.close()
    page.undo()  # floor: nothing changes, nothing broadcast
    page.save()
    transport.drain()
    assert heard[4:] == ["page"]


@pytest.mark.unit
def test_remote_reset_unregisters_in_core():
    undo_list, transport, _ = make_core(Channels("scene"))
    page = RemoteHistoryClient(transport, Channels("scene"))
    page.reset()
    transport.drain()
    assert undo_list.registered("set") is False


@pytest.mark.unit
def test_remote_register_is_refused(caplog):
    undo_list, transport, _ = make_core()
    page = RemoteHistoryClient(transport)
    with caplog.at_level(logging.ERROR, logger="editor_undo.client"):
        page.register("move", SetValue)
    assert "register it in the core" in caplog.text
    assert undo_list.registered("move") is False
    assert transport.pending == 0


@pytest.mark.unit
def test_closed_host_stops_serving():
    undo_list, transport, host = make_core()
    page = RemoteHistoryClient(transport)
    heard = []
    page.changed.append(lambda: heard.append(1))
    host.close()

    edit(page, Doc(), 1)
    transport.drain()
    assert len(undo_list.pending) == 0
    assert [m.channel for m in transport.dead_letter] == ["undo:add"]

    undo_list.add("set", {"doc": Doc(), "old": 0, "new": 1})
    assert heard == []
