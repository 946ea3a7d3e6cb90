"""
Shared constants for the LAN Chat Relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 8080

# Capacity
MAX_CLIENTS = 10

# Buffer Sizes
BUFFER_SIZE = 1024  # max bytes of one message line
MAX_PENDING_BYTES = 64 * 1024  # unsent bytes tolerated per recipient

# Timeouts
WRITE_TIMEOUT = 5.0  # seconds
REGISTRATION_TIMEOUT = 60.0  # seconds

# Client reconnection
MAX_RETRY_ATTEMPTS = 3
RECONNECT_DELAY_BASE = 1.0  # seconds

# Display names (UTF-8 bytes, after trimming the newline)
MIN_NAME_BYTES = 2
MAX_NAME_BYTES = 31

# Reserved identity and keywords
SERVER_NAME = 'Server'
SELF_NAME = 'You'
EXIT_KEYWORD = 'exit'

# History
HISTORY_FILE = 'chat_history'
MAX_MEMORY_HISTORY = 500

# Logging
LOG_LEVEL = 'INFO'
