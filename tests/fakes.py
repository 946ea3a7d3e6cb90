"""
Test doubles shared by the relay test cases.
"""

import asyncio

from relay_server.chat.errors import HistoryWriteError, TransportError


class FakeConnection:
    """In-memory stand-in for relay_server.chat.connection.Connection."""

    def __init__(self, *lines, peer=('127.0.0.1', 50000)):
        self.peer = peer
        self.incoming = asyncio.Queue()
        for line in lines:
            self.incoming.put_nowait(line)
        self.sent = []
        self.fail_writes = False
        self.fail_flush = False
        self.flush_gate = None  # asyncio.Event that flush waits on, if set
        self.close_calls = 0

    @property
    def closed(self):
        return self.close_calls > 0

    def feed(self, *lines):
        for line in lines:
            self.incoming.put_nowait(line)

    async def read_line(self, timeout=None):
        if self.closed:
            return b''
        return await self.incoming.get()

    def write(self, data):
        if self.closed or self.fail_writes:
            raise TransportError(f"write to {self.peer} refused")
        self.sent.append(data.decode('utf-8').rstrip('\n'))

    async def flush(self, timeout):
        if self.flush_gate is not None:
            await self.flush_gate.wait()
        if self.fail_flush:
            raise TransportError(f"flush to {self.peer} failed")

    async def send_line(self, data, timeout):
        self.write(data)
        await self.flush(timeout)

    async def close(self):
        self.close_calls += 1
        # Unblock a pending read the way a real socket close does
        self.incoming.put_nowait(b'')


class FakeSession:
    """Bare session object for registry and broadcast tests."""

    def __init__(self, display_name, connection=None):
        self.id = None
        self.display_name = display_name
        self.connection = connection or FakeConnection()


class BrokenHistorySink:
    def append(self, line):
        raise HistoryWriteError("disk full")

    def close(self):
        pass


async def wait_until(predicate, timeout=2.0):
    """Yield to the event loop until predicate() is true."""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.001)
    await asyncio.wait_for(_poll(), timeout)
