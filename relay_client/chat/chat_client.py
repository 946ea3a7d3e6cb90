"""
Chat client module.

This module handles the client side of the line protocol: connect, send the
display name, send chat lines and read the lines the relay forwards.
"""

import asyncio
from typing import Callable, Optional

from relay_common.constants import EXIT_KEYWORD, MAX_RETRY_ATTEMPTS, RECONNECT_DELAY_BASE
from relay_common.protocol_definitions import decode_text, encode_line, strip_line
from relay_client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self, retry_count: int = MAX_RETRY_ATTEMPTS,
                      base_delay: float = RECONNECT_DELAY_BASE) -> bool:
        """Establish connection to the server with retry logic and exponential backoff."""
        attempt = 0

        while attempt < retry_count:
            try:
                self.reader, self.writer = await asyncio.open_connection(self.host, self.port)
                logger.log_connection(self.host, self.port, True)
                return True
            except OSError as e:
                attempt += 1
                logger.log_connection(self.host, self.port, False)
                logger.log_error("connection", e)

                if attempt < retry_count:
                    delay = base_delay * (2 ** (attempt - 1))  # Exponential backoff
                    logger.info(f"[INFO] Retrying connection in {delay}s (attempt {attempt}/{retry_count})...")
                    await asyncio.sleep(delay)
        logger.error(f"[ERROR] Failed to connect after {retry_count} attempts")
        return False

    async def send_line(self, text: str) -> bool:
        """Send one line of text to the server."""
        if not self.connected:
            logger.error("[ERROR] Not connected to server")
            return False

        try:
            self.writer.write(encode_line(text))
            await self.writer.drain()
            return True
        except (ConnectionError, OSError) as e:
            logger.log_error("send", e)
            return False

    async def register(self, username: str) -> bool:
        """Send the display name; must be the first line on the connection."""
        return await self.send_line(username)

    async def leave(self) -> bool:
        return await self.send_line(EXIT_KEYWORD)

    async def receive_line(self) -> Optional[str]:
        """Next line from the server, or None once the server closed the connection."""
        try:
            data = await self.reader.readline()
        except (ConnectionError, OSError) as e:
            logger.log_error("receive", e)
            return None
        if not data:
            return None
        return decode_text(strip_line(data))

    async def listen(self, handler: Callable[[str], None]):
        """Pass every incoming line to handler until the server closes the connection."""
        while True:
            line = await self.receive_line()
            if line is None:
                logger.info("[INFO] Server closed connection")
                return
            handler(line)

    async def close(self):
        if self.writer is None:
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing connection: {e}")
