"""
Chat server module.

This module handles server-side chat messaging: turning inbound lines into
username claims or chat lines, and relaying the resulting notices to the
other participants.
"""

from typing import List, Optional

from common.errors import SendError
from common.protocol_definitions import (
    create_welcome_message, create_user_joined_message, create_user_left_message,
    create_chat_message, encode_message
)
from server.chat.registry import ClientRecord, ConnectionRegistry
from server.utils.logger import logger


class ChatServer:
    """Server-side chat functionality.

    Sends are blocking ``sendall`` calls with no outbound queue, so a peer
    that stops reading can stall the whole event loop until its socket
    buffer drains.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def send_to(self, record: ClientRecord, message: str):
        """Send a protocol line to one client, raising SendError on failure."""
        try:
            record.handle.sendall(encode_message(message))
        except OSError as e:
            raise SendError(record.uid, e) from e

    def send_message(self, uid: int, message: str) -> bool:
        """Send a protocol line to a specific client."""
        record = self.registry.get(uid)
        if record is None:
            return False

        try:
            self.send_to(record, message)
            return True
        except SendError as e:
            logger.error(str(e))
            return False

    def broadcast(self, message: str, exclude_uid: Optional[int] = None) -> List[int]:
        """
        Send a line to every authenticated client except exclude_uid.

        Each recipient is tried independently. Peers whose send fails stay
        registered; their uids are returned for the caller's information.
        """
        failed = []

        def should_receive(record: ClientRecord) -> bool:
            return record.authenticated and record.uid != exclude_uid

        def deliver(record: ClientRecord):
            try:
                self.send_to(record, message)
            except SendError as e:
                logger.error(f"Failed to broadcast to uid={record.uid}: {e.error}")
                failed.append(record.uid)

        self.registry.for_each(should_receive, deliver)
        return failed

    def handle_message(self, uid: int, text: str) -> bool:
        """
        Process one inbound line from a client.

        The first line a client sends is always its username, whatever it
        contains. Returns False when the client has to be disconnected.
        """
        record = self.registry.get(uid)
        if record is None:
            return False

        if not record.authenticated:
            return self.handle_login(record, text)

        self.handle_chat(record, text)
        return True

    def handle_login(self, record: ClientRecord, username: str) -> bool:
        """Process a username claim."""
        record.username = username
        record.authenticated = True
        logger.log_login(username, record.uid)

        # Send confirmation to the client
        try:
            self.send_to(record, create_welcome_message(username))
        except SendError as e:
            logger.error(str(e))
            # The join was never announced, so the teardown stays silent too
            record.authenticated = False
            return False

        # Broadcast user_joined to all other clients (but not the new user)
        self.broadcast(create_user_joined_message(username), exclude_uid=record.uid)
        return True

    def handle_chat(self, record: ClientRecord, text: str):
        """Process chat message and relay it to everyone else."""
        logger.log_chat(record.username, record.uid, text)
        self.broadcast(create_chat_message(record.username, text), exclude_uid=record.uid)

    def handle_departure(self, record: ClientRecord):
        """Notify the others that a client left. Unauthenticated clients leave silently."""
        logger.log_disconnect(record.username, record.uid)
        if record.authenticated:
            self.broadcast(create_user_left_message(record.username), exclude_uid=record.uid)
