#!/usr/bin/env python3
"""
LAN Chat Relay Server - Main Entry Point

This is the main entry point for the server application.
It wires the client registry, broadcast engine and history sink to the
TCP listener.
"""

import asyncio
import argparse
from typing import Optional, Set

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from relay_common.constants import LOG_LEVEL
from relay_server.chat.broadcast import BroadcastEngine
from relay_server.chat.connection import Connection
from relay_server.chat.history import FileHistorySink, HistorySink
from relay_server.chat.registry import ClientRegistry
from relay_server.chat.session import ClientSession
from relay_server.utils.config import ServerConfig
from relay_server.utils.logger import logger


class RelayServer:
    """Main server class that accepts clients and runs their sessions."""

    def __init__(self, config: ServerConfig, history: Optional[HistorySink] = None):
        self.config = config
        self.registry = ClientRegistry(config.max_clients)
        self.history = history if history is not None else FileHistorySink(config.history_file)
        self.engine = BroadcastEngine(self.registry, self.history, **config.get_delivery_settings())
        self.server: Optional[asyncio.AbstractServer] = None
        self.sessions: Set[ClientSession] = set()  # every running session, registered or not

    @property
    def port(self) -> int:
        """Port actually bound (useful when configured with port 0)."""
        return self.server.sockets[0].getsockname()[1]

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        connection = Connection(reader, writer, self.config.max_pending_bytes)
        logger.log_connection(connection.peer)

        # Excess connections are turned away before they can register
        if await self.registry.count() >= self.config.max_clients:
            logger.log_rejected(connection.peer, "server full")
            await connection.close()
            return

        session = ClientSession(
            connection, self.registry, self.engine,
            registration_timeout=self.config.registration_timeout,
            write_timeout=self.config.write_timeout
        )
        self.sessions.add(session)
        try:
            await session.run()
        finally:
            self.sessions.discard(session)

    async def start(self):
        """Bind the listening socket."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            limit=self.config.max_message_bytes
        )

        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Server listening on {addr} (max {self.config.max_clients} clients)")

    async def serve_forever(self):
        """Start the server if needed and accept clients until cancelled."""
        if self.server is None:
            await self.start()
        async with self.server:
            await self.server.serve_forever()

    async def stop(self):
        """Stop accepting clients and close every session, including unregistered ones."""
        if self.server is not None:
            self.server.close()
        await asyncio.gather(*(session.close() for session in list(self.sessions)))
        if self.server is not None:
            await self.server.wait_closed()
        self.history.close()
        logger.info("Server stopped")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='LAN Chat Relay Server')
    parser.add_argument('--host', type=str, default=None,
                        help='Host to bind to (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=None,
                        help='TCP port (default: 8080)')
    parser.add_argument('--max-clients', type=int, default=None,
                        help='Maximum concurrent clients (default: 10)')
    parser.add_argument('--history-file', type=str, default=None,
                        help='Chat history file (default: chat_history)')
    parser.add_argument('--echo', action='store_true',
                        help='Send every chat line back to its sender as "You: ..."')
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        help='Logging level (default: INFO)')
    return parser


def config_from_args(args) -> ServerConfig:
    overrides = {
        'host': args.host,
        'port': args.port,
        'max_clients': args.max_clients,
        'history_file': args.history_file,
    }
    config = ServerConfig(**{k: v for k, v in overrides.items() if v is not None})
    config.echo_own_messages = args.echo
    return config


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logger.set_level(args.log_level)

    try:
        server = RelayServer(config_from_args(args))
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except (OSError, ValueError) as e:
        logger.log_error("server", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
