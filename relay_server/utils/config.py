"""
Server configuration module.

This module handles server-side configuration settings.
"""

from relay_common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CLIENTS, HISTORY_FILE, BUFFER_SIZE,
    WRITE_TIMEOUT, REGISTRATION_TIMEOUT, MAX_PENDING_BYTES
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 max_clients: int = MAX_CLIENTS, history_file: str = HISTORY_FILE,
                 echo_own_messages: bool = False):
        if max_clients < 1:
            raise ValueError(f"max_clients must be at least 1, got {max_clients}")

        self.host = host
        self.port = port
        self.max_clients = max_clients
        self.history_file = history_file

        # Delivery settings
        self.echo_own_messages = echo_own_messages
        self.write_timeout = WRITE_TIMEOUT
        self.max_pending_bytes = MAX_PENDING_BYTES

        # Connection settings
        self.max_message_bytes = BUFFER_SIZE
        self.registration_timeout = REGISTRATION_TIMEOUT

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'max_clients': self.max_clients
        }

    def get_delivery_settings(self):
        """Get broadcast delivery settings."""
        return {
            'echo_own_messages': self.echo_own_messages,
            'write_timeout': self.write_timeout
        }
