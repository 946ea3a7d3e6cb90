"""
Errors raised by the chat relay core.

None of these is fatal to the process: a session that hits one of them is
closed, everything else keeps running.
"""


class RelayError(Exception):
    """Base class for chat relay errors."""


class CapacityExceeded(RelayError):
    """The registry already holds the maximum number of sessions."""

    def __init__(self, max_clients: int):
        super().__init__(f"Registry full ({max_clients} clients)")
        self.max_clients = max_clients


class InvalidRegistration(RelayError):
    """The registration line is not an acceptable display name."""


class TransportError(RelayError):
    """Read or write failure on one connection."""


class HistoryWriteError(RelayError):
    """Appending to the chat history failed."""
