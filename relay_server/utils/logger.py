"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chat_relay_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

    def set_level(self, level_name: str):
        """Change the level of the logger and its handlers."""
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr):
        """Log client connection."""
        self.info(f"New connection from {addr}")

    def log_rejected(self, addr, reason: str):
        """Log a connection dropped before registration."""
        self.info(f"Rejected connection from {addr}: {reason}")

    def log_join(self, username: str, uid: int):
        """Log user registration."""
        self.info(f"User '{username}' joined with uid={uid}")

    def log_leave(self, username: str, uid: int):
        """Log user leave."""
        self.info(f"User {username} (uid={uid}) left")

    def log_chat(self, username: str, uid: int, message: str):
        """Log chat message."""
        self.debug(f"Chat from {username} (uid={uid}): {message}")

    def log_delivery_failure(self, uid: int, error: Exception):
        """Log a failed write to one recipient."""
        self.warning(f"Failed to deliver to uid={uid}: {error}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
