"""
Error types shared by the chat relay server and client.

Startup errors are fatal to the process. Everything else is recovered
locally by whoever catches it and only shows up in the logs.
"""


class ChatError(Exception):
    """Base class for chat relay errors."""


class StartupError(ChatError):
    """The server could not be brought up."""


class SocketCreationError(StartupError):
    """The listening socket could not be created or configured."""


class BindError(StartupError):
    """The listening socket could not be bound to the requested address."""


class ListenError(StartupError):
    """The bound socket could not be put into listening mode."""


class InvalidPortError(StartupError, ValueError):
    """A port number outside 1-65535 (or not a number at all)."""

    def __init__(self, value):
        super().__init__(f"Invalid port number: {value!r}")
        self.value = value


class AcceptError(ChatError):
    """A pending connection could not be accepted."""


class CapacityExceededError(ChatError):
    """The connection registry is full."""

    def __init__(self, capacity: int):
        super().__init__(f"Registry is full ({capacity} clients)")
        self.capacity = capacity


class ReadError(ChatError):
    """Reading from a client socket failed."""


class PeerClosedError(ChatError):
    """The peer closed its side of the connection."""


class SendError(ChatError):
    """Sending to a socket failed."""

    def __init__(self, uid, error: Exception):
        super().__init__(f"Failed to send to uid={uid}: {error}")
        self.uid = uid
        self.error = error


class ConnectionFailedError(ChatError):
    """The client could not connect to the server."""
