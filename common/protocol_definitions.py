"""
Protocol definitions for the LAN Chat Relay.

The wire protocol is plain text over TCP: every message is a line terminated
by a single newline, with no length prefix or binary framing. The only
exception is the username prompt, which is sent without a terminator so the
client's cursor stays on the same line.
"""

from common.constants import ENCODING, LINE_TERMINATOR, MIN_PORT, MAX_PORT, QUIT_COMMANDS
from common.errors import InvalidPortError


USERNAME_PROMPT = "Enter your username: "
SERVER_FULL = "Server is full. Please try again later.\n"


def create_prompt_message() -> str:
    """Create the prompt sent to a freshly accepted client."""
    return USERNAME_PROMPT


def create_server_full_message() -> str:
    """Create the rejection sent when the registry is at capacity."""
    return SERVER_FULL


def create_welcome_message(username: str) -> str:
    """Create the personal welcome sent after a username claim."""
    return f"Welcome to the chat, {username}!\n"


def create_user_joined_message(username: str) -> str:
    """Create the notice broadcast when a user joins."""
    return f"Server: {username} has joined the chat\n"


def create_user_left_message(username: str) -> str:
    """Create the notice broadcast when an authenticated user leaves."""
    return f"Server: {username} has left the chat\n"


def create_chat_message(username: str, text: str) -> str:
    """Create a chat line as relayed to the other participants."""
    return f"{username}: {text}\n"


def encode_message(message: str) -> bytes:
    # Bytes that were not valid UTF-8 on the way in go back out unchanged
    return message.encode(ENCODING, errors='surrogateescape')


def decode_line(data: bytes) -> str:
    """
    Decode one received chunk and keep only its first line.

    Everything from the first newline onward is dropped: a single read
    yields at most one line and partial lines are never joined across
    reads. Invalid or truncated UTF-8 is carried as surrogate escapes, so
    encode_message() reproduces the exact bytes the client sent.
    """
    line = data.split(LINE_TERMINATOR.encode(ENCODING), 1)[0]
    return line.decode(ENCODING, errors='surrogateescape')


def to_display(text: str) -> str:
    """Render relayed text for logs, replacing bytes that are not UTF-8."""
    return encode_message(text).decode(ENCODING, errors='replace')


def is_quit_command(line: str) -> bool:
    """Check whether an input line is one of the client's local sentinels."""
    return line.strip() in QUIT_COMMANDS


def validate_port(value) -> int:
    """
    Convert a port argument to an int in the range 1-65535.

    Raises InvalidPortError for anything else.
    """
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise InvalidPortError(value) from None

    if port < MIN_PORT or port > MAX_PORT:
        raise InvalidPortError(value)
    return port
