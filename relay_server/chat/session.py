"""
Client session.

One session per accepted connection: it reads the display name, registers,
announces the join, forwards every chat line to the broadcast engine and
finally tears itself down.
"""

import asyncio
from enum import Enum
from typing import Optional

from relay_common.constants import REGISTRATION_TIMEOUT, WRITE_TIMEOUT
from relay_common.protocol_definitions import (
    MessageEvent, decode_text, encode_line, format_welcome, is_exit_command,
    parse_display_name, strip_line
)
from relay_server.chat.broadcast import BroadcastEngine
from relay_server.chat.errors import InvalidRegistration, RelayError, TransportError
from relay_server.chat.registry import ClientRegistry
from relay_server.utils.logger import logger


class SessionState(Enum):
    CONNECTING = 'connecting'
    ACTIVE = 'active'
    CLOSED = 'closed'


class ClientSession:
    """Per-connection state and receive loop."""

    def __init__(self, connection, registry: ClientRegistry, engine: BroadcastEngine,
                 registration_timeout: Optional[float] = REGISTRATION_TIMEOUT,
                 write_timeout: float = WRITE_TIMEOUT):
        self.connection = connection
        self.registry = registry
        self.engine = engine
        self.registration_timeout = registration_timeout
        self.write_timeout = write_timeout

        self.id: Optional[int] = None  # assigned by the registry
        self.display_name: Optional[str] = None
        self.state = SessionState.CONNECTING
        self._teardown: Optional[asyncio.Future] = None

    def __repr__(self):
        return f"<ClientSession uid={self.id} name={self.display_name!r} state={self.state.value}>"

    async def run(self):
        """Drive the session from registration to teardown."""
        try:
            await self.register()
        except RelayError as e:
            logger.log_rejected(self.connection.peer, str(e))
        else:
            try:
                await self._send_welcome()
                await self._receive_loop()
            except TransportError as e:
                logger.info(f"Connection of uid={self.id} lost: {e}")
        finally:
            await self.close()

    async def register(self):
        """
        Read the display name and join the registry.

        Raises TransportError if the name cannot be read, InvalidRegistration
        if it is rejected and CapacityExceeded if the registry is full. On
        success the session is ACTIVE and its join has been announced.
        """
        data = await self.connection.read_line(timeout=self.registration_timeout)
        if not data:
            raise TransportError("Connection closed before registration")

        name = parse_display_name(data)
        if name is None:
            raise InvalidRegistration(f"Invalid display name {strip_line(data)!r}")
        self.display_name = name

        await self.registry.register(self)
        self.state = SessionState.ACTIVE
        logger.log_join(self.display_name, self.id)

        await self.engine.announce_join(self)

    async def _send_welcome(self):
        await self.connection.send_line(encode_line(format_welcome(self.display_name)), self.write_timeout)

    async def _receive_loop(self):
        while self.state is SessionState.ACTIVE:
            data = await self.connection.read_line()
            if self.state is not SessionState.ACTIVE:
                # closed while the read was completing
                return
            if not data:
                logger.debug(f"uid={self.id} closed the connection")
                return

            text = decode_text(strip_line(data))
            if is_exit_command(text):
                logger.debug(f"uid={self.id} sent exit")
                return
            if not text.strip():
                continue

            logger.log_chat(self.display_name, self.id, text)
            await self.engine.deliver(MessageEvent(self.id, self.display_name, text))

    async def close(self):
        """
        Tear the session down exactly once.

        Concurrent and repeated calls wait on the same teardown. The leave
        announcement is only sent if the session had become ACTIVE.
        """
        if self._teardown is None:
            was_active = self.state is SessionState.ACTIVE
            self.state = SessionState.CLOSED
            self._teardown = asyncio.ensure_future(self._tear_down(was_active))
        await asyncio.shield(self._teardown)

    async def _tear_down(self, was_active: bool):
        try:
            if was_active and await self.registry.remove(self.id):
                logger.log_leave(self.display_name, self.id)
                await self.engine.announce_leave(self)
        finally:
            await self.connection.close()
