"""
Client registry.

The table of active sessions. One asyncio lock guards every read and write
of the table; the broadcast engine takes the same lock (through
``exclusive()``) so that a leave can never interleave with a fan-out.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from relay_server.chat.errors import CapacityExceeded


class RegistryView:
    """Read-only access to the registry while its lock is held."""

    def __init__(self, sessions: Dict[int, object]):
        self._sessions = sessions

    def recipients(self, exclude_id: Optional[int] = None) -> List:
        return [session for uid, session in self._sessions.items() if uid != exclude_id]

    def get(self, uid: int):
        return self._sessions.get(uid)

    def __len__(self):
        return len(self._sessions)


class ClientRegistry:
    """Shared table of registered sessions, bounded by max_clients."""

    def __init__(self, max_clients: int):
        self.max_clients = max_clients
        self._sessions: Dict[int, object] = {}  # uid -> session, in registration order
        self._next_uid = 1
        self._lock = asyncio.Lock()

    async def register(self, session) -> int:
        """
        Assign a fresh uid to the session and insert it.

        The uid is stored on ``session.id`` before the session becomes
        visible to snapshots. Raises CapacityExceeded when full; no uid is
        consumed in that case.
        """
        async with self._lock:
            if len(self._sessions) >= self.max_clients:
                raise CapacityExceeded(self.max_clients)
            uid = self._next_uid
            self._next_uid += 1
            session.id = uid
            self._sessions[uid] = session
            return uid

    async def remove(self, uid: int) -> bool:
        """Remove a session. Returns False if it was already gone."""
        async with self._lock:
            return self._sessions.pop(uid, None) is not None

    async def snapshot_recipients(self, exclude_id: Optional[int] = None) -> List:
        """Every active session except exclude_id, at one point in time."""
        async with self.exclusive() as view:
            return view.recipients(exclude_id)

    async def count(self) -> int:
        async with self._lock:
            return len(self._sessions)

    @asynccontextmanager
    async def exclusive(self):
        """Hold the registry lock and yield a RegistryView."""
        async with self._lock:
            yield RegistryView(self._sessions)
