"""
Client configuration module.

This module handles client-side configuration settings.
"""

from relay_common.constants import DEFAULT_HOST, DEFAULT_PORT, MAX_RETRY_ATTEMPTS, RECONNECT_DELAY_BASE


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = None):
        self.host = host
        self.port = port
        self.username = username

        # Connection settings
        self.retry_count = MAX_RETRY_ATTEMPTS
        self.retry_base_delay = RECONNECT_DELAY_BASE

