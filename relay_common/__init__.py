"""
Shared definitions for the LAN Chat Relay client and server.
"""
