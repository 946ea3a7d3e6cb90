"""
Server package for the LAN Chat Relay.

This package contains all server-side functionality including:
- Client registry and session handling
- Broadcast of chat lines and join/leave announcements
- Chat history logging
- Configuration and utilities
"""
