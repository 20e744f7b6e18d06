"""
Chat client module.

This module handles the client-side chat session: one thread prints
whatever the server sends, while the calling thread forwards lines typed by
the user.
"""

import codecs
import socket
import sys
import threading
from typing import Optional, TextIO

from common.constants import BUFFER_SIZE, ENCODING
from common.errors import ConnectionFailedError
from common.protocol_definitions import encode_message, is_quit_command
from client.utils.config import ClientConfig
from client.utils.logger import logger


class ChatSession:
    """Client-side chat functionality."""

    def __init__(self, config: Optional[ClientConfig] = None,
                 input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None):
        self.config = config or ClientConfig()
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.output_stream = output_stream if output_stream is not None else sys.stdout
        self.sock: Optional[socket.socket] = None
        self.connected = False
        self.receive_thread: Optional[threading.Thread] = None

    def connect(self):
        """Establish connection to the server."""
        info = self.config.get_connection_info()
        host, port = info['host'], info['port']
        try:
            socket.inet_pton(socket.AF_INET, host)
        except OSError:
            logger.log_connection(host, port, False)
            raise ConnectionFailedError(f"Invalid address: {host}") from None

        try:
            self.sock = socket.create_connection((host, port))
        except OSError as e:
            logger.log_connection(host, port, False)
            raise ConnectionFailedError(f"Failed to connect to server: {e}") from e

        self.connected = True
        logger.log_connection(host, port, True)

    def run(self):
        """Main client loop."""
        if self.sock is None:
            self.connect()

        self._write("\n--- Multi-Client Chat ---\n")
        self._write("Type 'quit' or 'exit' to disconnect\n")
        self._write("-------------------------\n\n")

        self.receive_thread = threading.Thread(target=self.receive_messages, daemon=True)
        self.receive_thread.start()

        try:
            self.send_messages()
        finally:
            self._finish_sending()
            self.receive_thread.join()
            self.close()
            logger.info("Disconnected from server")

    def receive_messages(self):
        """Print everything the server sends until the connection ends."""
        # A character split across two reads is held back until it is complete
        decoder = codecs.getincrementaldecoder(ENCODING)(errors='replace')

        # Keeps reading after a local quit: the server's close ends the loop
        while True:
            try:
                data = self.sock.recv(BUFFER_SIZE - 1)
            except OSError as e:
                self._write(decoder.decode(b'', final=True))
                if self.connected:
                    self._write("\nError: Failed to receive data\n")
                    logger.debug(f"recv failed: {e}")
                self.connected = False
                break

            if not data:
                self._write(decoder.decode(b'', final=True))
                # After a local quit the close is expected and not reported
                if self.connected:
                    self._write("\nServer closed connection\n")
                self.connected = False
                break

            self._write(decoder.decode(data))

    def send_messages(self):
        """Forward input lines to the server until quit, EOF or disconnect."""
        while self.connected:
            line = self.input_stream.readline()
            if not line or not self.connected:
                break

            message = line.rstrip('\n')
            try:
                self.sock.sendall(encode_message(message + '\n'))
            except OSError as e:
                self.connected = False
                self._write("Error: Failed to send message\n")
                logger.log_error("send", e)
                break

            if is_quit_command(message):
                self.connected = False
                break

    def close(self):
        """Close the connection."""
        self.connected = False
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def _finish_sending(self):
        # A write-side shutdown lets the server see an ordinary disconnect;
        # its close then ends the receiver's pending recv.
        if self.sock is None:
            return
        try:
            self.sock.shutdown(socket.SHUT_WR)
        except OSError:
            # Already disconnected
            pass

    def _write(self, text: str):
        if not text:
            return
        self.output_stream.write(text)
        self.output_stream.flush()
