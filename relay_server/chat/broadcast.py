"""
Broadcast engine.

Formats one event, appends it to the chat history and fans it out to every
other registered session. Snapshot, history append and the buffered writes
happen under the registry lock, so all recipients and the history see
events in one total order. Draining the sockets happens after the lock is
released, each recipient bounded by write_timeout, so a stalled client
cannot hold up the registry.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Union

from relay_common.constants import WRITE_TIMEOUT
from relay_common.protocol_definitions import (
    Announcement, AnnouncementKinds, MessageEvent, encode_line,
    format_announcement, format_chat_line, format_own_chat_line
)
from relay_server.chat.errors import HistoryWriteError, TransportError
from relay_server.chat.history import HistorySink
from relay_server.chat.registry import ClientRegistry
from relay_server.utils.logger import logger


@dataclass
class DeliveryReport:
    """Outcome of one deliver() call."""
    line: Optional[str] = None
    delivered: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    logged: bool = False

    @property
    def dropped(self) -> bool:
        return self.line is None


class BroadcastEngine:
    """Fan-out of chat lines and lifecycle announcements."""

    def __init__(self, registry: ClientRegistry, history: HistorySink,
                 write_timeout: float = WRITE_TIMEOUT, echo_own_messages: bool = False):
        self.registry = registry
        self.history = history
        self.write_timeout = write_timeout
        self.echo_own_messages = echo_own_messages

    async def announce_join(self, session) -> DeliveryReport:
        return await self.deliver(Announcement(session.id, session.display_name, AnnouncementKinds.JOINED))

    async def announce_leave(self, session) -> DeliveryReport:
        return await self.deliver(Announcement(session.id, session.display_name, AnnouncementKinds.LEFT))

    async def deliver(self, event: Union[MessageEvent, Announcement]) -> DeliveryReport:
        """
        Deliver one event to every registered session except its origin.

        Chat events whose text is blank are dropped: nothing is sent and
        nothing is logged. When echo_own_messages is set the origin gets
        its own chat line back rendered as "You: ...".
        """
        own_line = None
        if isinstance(event, Announcement):
            line = format_announcement(event.origin_name, event.kind)
        else:
            if not event.raw_text.strip():
                logger.debug(f"Dropping empty message from uid={event.origin_id}")
                return DeliveryReport()
            line = format_chat_line(event.origin_name, event.raw_text)
            if self.echo_own_messages:
                own_line = format_own_chat_line(event.raw_text)

        report = DeliveryReport(line=line)
        payload = encode_line(line)
        pending = []

        async with self.registry.exclusive() as members:
            report.logged = self._append_history(line)

            targets = [(session, payload) for session in members.recipients(exclude_id=event.origin_id)]
            if own_line is not None:
                origin = members.get(event.origin_id)
                if origin is not None:
                    targets.append((origin, encode_line(own_line)))

            for session, data in targets:
                try:
                    session.connection.write(data)
                except TransportError as e:
                    logger.log_delivery_failure(session.id, e)
                    report.failed.append(session.id)
                else:
                    pending.append(session)

        # Drain outside the lock
        results = await asyncio.gather(*(self._flush(session) for session in pending))
        for session, ok in zip(pending, results):
            if ok:
                report.delivered.append(session.id)
            else:
                report.failed.append(session.id)

        return report

    def _append_history(self, line: str) -> bool:
        try:
            self.history.append(line)
            return True
        except HistoryWriteError as e:
            logger.log_error("history append", e)
            return False

    async def _flush(self, session) -> bool:
        try:
            await session.connection.flush(self.write_timeout)
            return True
        except TransportError as e:
            logger.log_delivery_failure(session.id, e)
            return False
