import asyncio
import json

from connection import Connection, deliver


class Recorder:
    def __init__(self, fail=False):
        self.frames = []
        self.fail = fail

    async def __call__(self, text):
        if self.fail:
            raise ConnectionError("socket gone")
        self.frames.append(json.loads(text))


async def run_pump(conn, seconds=0.05):
    task = asyncio.create_task(conn.pump())
    await asyncio.sleep(seconds)
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


def test_pump_sends_in_fifo_order():
    recorder = Recorder()
    conn = Connection(recorder)
    messages = [{"type": "offer", "seq": i} for i in range(5)]
    for message in messages:
        assert deliver(conn, message)

    asyncio.run(run_pump(conn))

    assert recorder.frames == messages
    assert conn.pending == 0


def test_overflow_drops_oldest():
    recorder = Recorder()
    conn = Connection(recorder, max_queue=2)
    for i in range(4):
        conn.enqueue({"type": "ice-candidate", "seq": i})

    assert conn.pending == 2
    asyncio.run(run_pump(conn))

    assert [m["seq"] for m in recorder.frames] == [2, 3]


def test_deliver_skips_closed_connection():
    conn = Connection(Recorder())
    conn.mark_closed()

    assert deliver(conn, {"type": "peer-left", "room": "1234"}) is False
    assert conn.pending == 0


def test_send_failure_marks_connection_dead():
    conn = Connection(Recorder(fail=True))
    deliver(conn, {"type": "offer"})

    asyncio.run(run_pump(conn))

    assert not conn.is_open
    assert deliver(conn, {"type": "answer"}) is False


def test_mark_closed_reports_first_call_only():
    conn = Connection(Recorder())

    assert conn.mark_closed() is True
    assert conn.mark_closed() is False
    assert not conn.is_open


def test_identity():
    send = Recorder()
    a = Connection(send, connection_id="same")
    b = Connection(send, connection_id="same")
    c = Connection(send)

    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len(c.connection_id) == 32
