#!/usr/bin/env python3
"""
LAN Chat Relay Server

Single-threaded event loop: one readiness wait covers the listening socket
and every client socket, and each wake-up is dispatched to either accepting
a new connection or reading from a client. All registry changes happen on
this one thread, so nothing here takes a lock.

The loop is driven by hand with selectors rather than asyncio streams so
that each tick is an explicit, testable step (see poll()): the uids alive
when a tick starts are the only ones it reads from, and a client torn down
mid-tick is skipped instead of touched.
"""

import selectors
import socket
from typing import Optional

from common.errors import (
    SocketCreationError, BindError, ListenError, AcceptError,
    CapacityExceededError, ReadError, PeerClosedError
)
from common.protocol_definitions import create_prompt_message, create_server_full_message, decode_line, encode_message
from server.chat.chat_server import ChatServer
from server.chat.registry import ConnectionRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ChatRelayServer:
    """Main server class that integrates all functionality."""

    def __init__(self, config: Optional[ServerConfig] = None, registry: Optional[ConnectionRegistry] = None):
        self.config = config or ServerConfig()
        self.registry = registry or ConnectionRegistry(self.config.max_clients)
        self.chat_server = ChatServer(self.registry)
        self.selector = selectors.DefaultSelector()
        self.server_socket: Optional[socket.socket] = None
        self.running = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def address(self):
        """The (host, port) the server is bound to."""
        if self.server_socket is None:
            return None
        return self.server_socket.getsockname()[:2]

    def start(self):
        """Create, bind and listen on the server socket."""
        info = self.config.get_connection_info()
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            raise SocketCreationError(f"Failed to create socket: {e}") from e

        try:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            except OSError as e:
                raise SocketCreationError(f"Failed to set socket options: {e}") from e

            try:
                sock.bind((info['host'], info['port']))
            except OSError as e:
                raise BindError(f"Failed to bind socket to port {info['port']}: {e}") from e

            try:
                sock.listen(self.config.listen_backlog)
            except OSError as e:
                raise ListenError(f"Failed to listen on socket: {e}") from e
        except (SocketCreationError, BindError, ListenError):
            sock.close()
            raise

        self.server_socket = sock
        self.selector.register(sock, selectors.EVENT_READ, data=None)
        host, port = self.address
        logger.log_listening(host, port)

    def serve_forever(self):
        """Run ticks until shutdown() is called."""
        if self.server_socket is None:
            self.start()

        self.running = True
        while self.running:
            self.poll()

    def shutdown(self):
        """Stop serve_forever() after the current tick."""
        self.running = False

    def poll(self, timeout: Optional[float] = None) -> int:
        """
        Run one tick of the event loop.

        Blocks until at least one socket is readable (or timeout expires),
        accepts a pending connection if there is one, then reads from every
        ready client. Returns the number of ready sockets. Errors from the
        wait itself are fatal and propagate.
        """
        events = self.selector.select(timeout)
        live_uids = self.registry.ids()

        accept_ready = False
        ready_uids = set()
        for key, _mask in events:
            if key.data is None:
                accept_ready = True
            else:
                ready_uids.add(key.data)

        if accept_ready:
            self.accept_client()

        for uid in live_uids:
            if uid not in ready_uids:
                continue
            # Removed earlier in this tick
            if uid not in self.registry:
                continue
            self.handle_client(uid)

        return len(events)

    def accept_client(self):
        """Accept one pending connection, rejecting it if the server is full."""
        try:
            conn, addr = self._accept()
        except AcceptError as e:
            logger.log_error("accept", e)
            return

        try:
            uid = self.registry.add(conn, addr)
        except CapacityExceededError as e:
            logger.log_rejected(addr, e.capacity)
            try:
                conn.sendall(encode_message(create_server_full_message()))
            except OSError as send_error:
                logger.log_error("reject", send_error)
            finally:
                conn.close()
            return

        self.selector.register(conn, selectors.EVENT_READ, data=uid)
        logger.log_connection(addr, uid)

        # Request username from client
        if not self.chat_server.send_message(uid, create_prompt_message()):
            self.disconnect_client(uid)

    def handle_client(self, uid: int):
        """Read from one ready client and route what it sent."""
        record = self.registry.get(uid)
        if record is None:
            return

        try:
            text = self._receive(record)
        except PeerClosedError:
            logger.debug(f"Peer closed connection (uid={uid})")
            self.disconnect_client(uid)
            return
        except ReadError as e:
            logger.log_error(f"read from uid={uid}", e)
            self.disconnect_client(uid)
            return

        if not self.chat_server.handle_message(uid, text):
            self.disconnect_client(uid)

    def disconnect_client(self, uid: int):
        """Tear down a client: announce, unwatch, close and forget it."""
        record = self.registry.get(uid)
        if record is None:
            return

        self.chat_server.handle_departure(record)

        try:
            self.selector.unregister(record.handle)
        except (KeyError, ValueError):
            pass
        record.handle.close()
        self.registry.remove(uid)

    def close(self):
        """Close every client socket and the listening socket."""
        self.running = False
        for record in self.registry.records():
            try:
                self.selector.unregister(record.handle)
            except (KeyError, ValueError):
                pass
            record.handle.close()
            self.registry.remove(record.uid)

        if self.server_socket is not None:
            try:
                self.selector.unregister(self.server_socket)
            except (KeyError, ValueError):
                pass
            self.server_socket.close()
            self.server_socket = None
            logger.info("Server: Shut down successfully")

        self.selector.close()

    def _accept(self):
        try:
            return self.server_socket.accept()
        except OSError as e:
            raise AcceptError(f"Failed to accept client connection: {e}") from e

    def _receive(self, record) -> str:
        try:
            data = record.handle.recv(self.config.buffer_size - 1)
        except OSError as e:
            raise ReadError(f"Failed to receive data from client: {e}") from e

        if not data:
            raise PeerClosedError(f"uid={record.uid} closed the connection")
        return decode_line(data)
