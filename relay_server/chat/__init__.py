"""
Chat module for the relay core.

Handles:
- Session registration and teardown
- Registry of active sessions
- Fan-out of chat lines and announcements
- Chat history sinks
"""
