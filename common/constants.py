"""
Shared constants for the LAN Chat Relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = '127.0.0.1'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 8080
MIN_PORT = 1
MAX_PORT = 65535

# Connection limits
MAX_CLIENTS = 10

# Buffer Sizes
BUFFER_SIZE = 1024  # one byte is reserved, so at most 1023 are read per recv

# Text encoding of the wire protocol
ENCODING = 'utf-8'
LINE_TERMINATOR = '\n'

# Client commands that end the session locally
QUIT_COMMANDS = ('quit', 'exit')

# Logging
LOG_DIR = 'logs'
CHAT_LOG_FILE = 'chat_history.log'
