"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, CHAT_LOG_FILE
from common.protocol_definitions import to_display


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chat_relay_server')
        self.configure(logs_dir, log_level)

    def configure(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        """(Re)configure the console handler and the chat history location."""
        self.logs_dir = Path(logs_dir)
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

        # Set up file paths
        self.chat_log_path = self.logs_dir / CHAT_LOG_FILE

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

    def log_listening(self, host: str, port: int):
        """Log that the server is accepting connections."""
        self.info(f"Server: Listening on {host}:{port}...")

    def log_connection(self, addr: tuple, uid: int):
        """Log client connection."""
        self.info(f"New connection from {addr}, assigned uid={uid}")

    def log_rejected(self, addr: tuple, capacity: int):
        """Log a connection turned away because the server is full."""
        self.warning(f"Rejected connection from {addr}: server is full ({capacity} clients)")

    def log_login(self, username: str, uid: int):
        """Log user login."""
        self.info(f"User '{to_display(username)}' joined with uid={uid}")

    def log_disconnect(self, username: str, uid: int):
        """Log user disconnect."""
        if username is None:
            self.info(f"Unauthenticated client (uid={uid}) disconnected")
        else:
            self.info(f"User {to_display(username)} (uid={uid}) disconnected")

    def log_chat(self, username: str, uid: int, message: str):
        """Log chat message."""
        username, message = to_display(username), to_display(message)
        self.info(f"Chat from {username} (uid={uid}): {message}")
        self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {username} (uid={uid}) | {message}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
