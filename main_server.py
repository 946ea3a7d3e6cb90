#!/usr/bin/env python3
"""
LAN Chat Relay Server - Main Entry Point

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           TCP port (default: 8080)
    --max-clients N       Maximum concurrent clients (default: 10)
    --history-file PATH   Chat history file (default: chat_history)
    --echo                Echo chat lines back to their sender
    --log-level LEVEL     Logging level (default: INFO)
"""

if __name__ == "__main__":
    import sys

    from relay_server.main_server import main

    sys.exit(main())
