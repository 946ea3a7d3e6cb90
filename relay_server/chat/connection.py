"""
Connection handle for one client.

Wraps the asyncio stream pair of an accepted socket and turns its failures
into TransportError.
"""

import asyncio
from typing import Optional

from relay_server.chat.errors import TransportError
from relay_server.utils.logger import logger


class Connection:
    """Bidirectional line channel owned by exactly one session."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 max_pending_bytes: int):
        self.reader = reader
        self.writer = writer
        self.max_pending_bytes = max_pending_bytes
        self.peer = writer.get_extra_info('peername')
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed or self.writer.is_closing()

    async def read_line(self, timeout: Optional[float] = None) -> bytes:
        """
        Read one line including its newline.

        Returns b'' once the peer has closed the connection (or the handle
        was closed locally). Raises TransportError on socket errors, on a
        line longer than the reader limit and on timeout.
        """
        try:
            if timeout is None:
                return await self.reader.readline()
            return await asyncio.wait_for(self.reader.readline(), timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"No data from {self.peer} within {timeout}s")
        except ValueError as e:
            # readline() raises ValueError when the line exceeds the limit
            raise TransportError(f"Line too long from {self.peer}: {e}")
        except (ConnectionError, OSError) as e:
            raise TransportError(f"Read from {self.peer} failed: {e}")

    def write(self, data: bytes):
        """
        Buffer data for sending without blocking.

        Refuses the write when the connection is closing or when the peer
        already has more than max_pending_bytes unsent.
        """
        if self.closed:
            raise TransportError(f"Connection to {self.peer} is closed")
        pending = self.writer.transport.get_write_buffer_size()
        if pending > self.max_pending_bytes:
            raise TransportError(f"Send buffer of {self.peer} full ({pending} bytes pending)")
        try:
            self.writer.write(data)
        except (ConnectionError, OSError, RuntimeError) as e:
            raise TransportError(f"Write to {self.peer} failed: {e}")

    async def flush(self, timeout: float):
        """Wait until buffered data is handed to the socket."""
        try:
            await asyncio.wait_for(self.writer.drain(), timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"Write to {self.peer} timed out after {timeout}s")
        except (ConnectionError, OSError) as e:
            raise TransportError(f"Write to {self.peer} failed: {e}")

    async def send_line(self, data: bytes, timeout: float):
        self.write(data)
        await self.flush(timeout)

    async def close(self):
        """Close the socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing connection to {self.peer}: {e}")
