"""
Protocol definitions for the LAN Chat Relay.

The wire protocol is plain text: newline-terminated UTF-8 lines. The first
line a client sends is its display name, every following line is chat text.
This module defines the event structures passed from sessions to the
broadcast engine and the helpers that render them as lines.
"""

from dataclasses import dataclass
from typing import Optional

from relay_common.constants import (
    MIN_NAME_BYTES, MAX_NAME_BYTES, SERVER_NAME, SELF_NAME, EXIT_KEYWORD
)


class AnnouncementKinds:
    JOINED = 'joined'
    LEFT = 'left'


@dataclass(frozen=True)
class MessageEvent:
    """Chat line sent by one session."""
    origin_id: int
    origin_name: str
    raw_text: str


@dataclass(frozen=True)
class Announcement:
    """Join or leave of a session, attributed to the server."""
    origin_id: int
    origin_name: str
    kind: str


def strip_line(data: bytes) -> bytes:
    """Remove the trailing newline (and a carriage return before it)."""
    if data.endswith(b'\n'):
        data = data[:-1]
    if data.endswith(b'\r'):
        data = data[:-1]
    return data


def encode_line(text: str) -> bytes:
    return text.encode('utf-8') + b'\n'


def decode_text(data: bytes) -> str:
    """Decode chat text, replacing invalid UTF-8 sequences."""
    return data.decode('utf-8', errors='replace')


def parse_display_name(data: bytes) -> Optional[str]:
    """
    Validate a registration line.

    Returns the display name, or None when it is not valid UTF-8, is not
    between MIN_NAME_BYTES and MAX_NAME_BYTES long, or is the reserved
    server identity.
    """
    raw = strip_line(data)
    if not MIN_NAME_BYTES <= len(raw) <= MAX_NAME_BYTES:
        return None
    try:
        name = raw.decode('utf-8')
    except UnicodeDecodeError:
        return None
    if name == SERVER_NAME:
        return None
    return name


def is_exit_command(text: str) -> bool:
    return text == EXIT_KEYWORD


def format_chat_line(name: str, text: str) -> str:
    return f"{name}: {text}"


def format_own_chat_line(text: str) -> str:
    """Rendering of a chat line for the client that sent it."""
    return format_chat_line(SELF_NAME, text)


def format_announcement(name: str, kind: str) -> str:
    if kind == AnnouncementKinds.JOINED:
        return format_chat_line(SERVER_NAME, f"{name} has joined the chat")
    if kind == AnnouncementKinds.LEFT:
        return format_chat_line(SERVER_NAME, f"{name} has left the chat")
    raise ValueError(f"Unknown announcement kind: {kind}")


def format_welcome(name: str) -> str:
    return f"Welcome, {name}!"
