"""
Server configuration module.

This module handles server-side configuration settings.
"""

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CLIENTS, BUFFER_SIZE, LOG_DIR
from common.protocol_definitions import validate_port


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 max_clients: int = MAX_CLIENTS, log_dir: str = LOG_DIR):
        self.host = host
        # Port 0 asks the OS for a free port
        self.port = port if port == 0 else validate_port(port)

        # Connection settings
        if max_clients < 1:
            raise ValueError(f"max_clients must be at least 1, got {max_clients}")
        self.max_clients = max_clients
        self.listen_backlog = max_clients
        self.buffer_size = BUFFER_SIZE

        # Logging configuration
        self.logs_dir = log_dir

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'max_clients': self.max_clients
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir
        }
