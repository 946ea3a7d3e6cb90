#!/usr/bin/env python3
"""
LAN Chat Relay Client - Main Entry Point

Usage:
    python main_client.py --username alice

Optional arguments:
    --host HOST           Server host (default: localhost)
    --port PORT           Server port (default: 8080)
    --username NAME       Display name, 2-31 bytes (prompted if omitted)
"""

if __name__ == "__main__":
    import sys

    from relay_client.main_client import main

    sys.exit(main())
