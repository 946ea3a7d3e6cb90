"""
Client package for the LAN Chat Relay.

This package contains the terminal chat client and its utilities.
"""
