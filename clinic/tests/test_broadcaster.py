import asyncio

import pytest

from clinic.realtime.broadcaster import (
    EVENT_NEW_APPOINTMENT,
    EVENT_WELCOME,
    BroadcastEvent,
    ConnectionRegistry,
    EventBroadcaster,
)


class Recorder:
    def __init__(self, delay=0):
        self.events = []
        self.delay = delay

    async def send_event(self, event):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.events.append(event)


class Broken:
    def __init__(self):
        self.calls = 0

    async def send_event(self, event):
        self.calls += 1
        raise ConnectionResetError("gone")


def appointment_event(n=1):
    return BroadcastEvent(type=EVENT_NEW_APPOINTMENT, message=f"appointment {n}", data={"appointment_id": n})


@pytest.fixture
def hub():
    return EventBroadcaster(ConnectionRegistry())


@pytest.mark.asyncio
async def test_broadcast_reaches_every_registered_connection(hub):
    a, b = Recorder(), Recorder(delay=0.01)
    hub.register(a)
    hub.register(b)
    delivered = await hub.broadcast(appointment_event())
    assert delivered == 2
    assert a.events == b.events == [{"type": "NEW_APPOINTMENT", "message": "appointment 1", "data": {"appointment_id": 1}}]


@pytest.mark.asyncio
async def test_broadcast_with_no_listeners_is_a_noop(hub):
    assert await hub.broadcast(appointment_event()) == 0


@pytest.mark.asyncio
async def test_failed_connection_is_dropped_and_others_still_receive(hub):
    good, bad = Recorder(), Broken()
    hub.register(good)
    hub.register(bad)

    assert await hub.broadcast(appointment_event(1)) == 1
    assert bad not in hub.registry
    assert len(hub.registry) == 1

    await hub.broadcast(appointment_event(2))
    assert bad.calls == 1
    assert [e["data"]["appointment_id"] for e in good.events] == [1, 2]


@pytest.mark.asyncio
async def test_on_connect_sends_single_welcome_without_history(hub):
    early = Recorder()
    hub.register(early)
    await hub.broadcast(appointment_event(1))

    late = Recorder()
    await hub.on_connect(late)
    assert late.events == [{
        "type": EVENT_WELCOME,
        "message": "Welcome to SmartHealthcare Real-Time Updates!",
        "data": {},
    }]
    assert late in hub.registry

    await hub.broadcast(appointment_event(2))
    assert [e["type"] for e in late.events] == [EVENT_WELCOME, EVENT_NEW_APPOINTMENT]
    assert all(e["type"] != EVENT_WELCOME for e in early.events)


@pytest.mark.asyncio
async def test_failed_welcome_never_registers(hub):
    bad = Broken()
    with pytest.raises(ConnectionResetError):
        await hub.on_connect(bad)
    assert len(hub.registry) == 0


def test_unregister_is_idempotent(hub):
    conn = Recorder()
    hub.register(conn)
    hub.unregister(conn)
    hub.unregister(conn)
    assert conn not in hub.registry


def test_broadcast_sync_bridges_sync_callers(hub):
    conn = Recorder()
    hub.register(conn)
    assert hub.broadcast_sync(appointment_event(5)) == 1
    assert conn.events[0]["data"] == {"appointment_id": 5}
