"""
Connection registry module.

Tracks the live client records of the chat relay. Records are keyed by a
uid handed out from a counter that never goes backwards, so a uid that has
been removed can never come back and point at a different connection.
"""

import socket
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from common.constants import MAX_CLIENTS
from common.errors import CapacityExceededError


@dataclass
class ClientRecord:
    """One accepted connection."""
    uid: int
    handle: socket.socket
    address: Optional[tuple] = None
    username: Optional[str] = None
    authenticated: bool = False


class ConnectionRegistry:
    """Bounded collection of live client records.

    Not thread-safe: every call is expected to come from the event loop.
    """

    def __init__(self, capacity: int = MAX_CLIENTS):
        self._capacity = capacity
        self._records: Dict[int, ClientRecord] = {}  # uid -> record
        self._next_uid = 1

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, uid) -> bool:
        return uid in self._records

    def is_full(self) -> bool:
        return len(self._records) >= self._capacity

    def add(self, handle: socket.socket, address: Optional[tuple] = None) -> int:
        """
        Register a freshly accepted socket as an unauthenticated record.

        Raises CapacityExceededError when the registry is full; the caller
        then owns the socket and must reject and close it.
        """
        if self.is_full():
            raise CapacityExceededError(self._capacity)

        uid = self._next_uid
        self._next_uid += 1
        self._records[uid] = ClientRecord(uid=uid, handle=handle, address=address)
        return uid

    def remove(self, uid: int) -> Optional[ClientRecord]:
        """Remove a record. Removing an unknown uid is a no-op that returns None."""
        return self._records.pop(uid, None)

    def get(self, uid: int) -> Optional[ClientRecord]:
        return self._records.get(uid)

    def ids(self) -> List[int]:
        """Snapshot of the live uids."""
        return list(self._records)

    def records(self) -> List[ClientRecord]:
        """Snapshot of the live records."""
        return list(self._records.values())

    def for_each(self, predicate: Callable[[ClientRecord], bool], action: Callable[[ClientRecord], None]):
        """Call action on every record matching predicate.

        Works on a snapshot, so action may remove records without breaking
        the iteration. Records removed before their turn are skipped.
        """
        for record in self.records():
            if record.uid not in self._records:
                continue
            if predicate(record):
                action(record)
