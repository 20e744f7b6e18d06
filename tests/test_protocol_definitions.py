#!/usr/bin/env python3
"""
Unit tests for common/protocol_definitions.py
"""

import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.errors import InvalidPortError, StartupError
from common.protocol_definitions import (
    create_prompt_message, create_server_full_message, create_welcome_message,
    create_user_joined_message, create_user_left_message, create_chat_message,
    decode_line, encode_message, to_display, is_quit_command, validate_port
)


class TestProtocolMessages(unittest.TestCase):
    """The exact bytes every client relies on."""

    def test_server_lines(self):
        self.assertEqual(create_prompt_message(), "Enter your username: ")
        self.assertEqual(create_server_full_message(), "Server is full. Please try again later.\n")
        self.assertEqual(create_welcome_message("alice"), "Welcome to the chat, alice!\n")
        self.assertEqual(create_user_joined_message("bob"), "Server: bob has joined the chat\n")
        self.assertEqual(create_user_left_message("alice"), "Server: alice has left the chat\n")
        self.assertEqual(create_chat_message("bob", "hi"), "bob: hi\n")

    def test_empty_username_is_formatted_as_is(self):
        self.assertEqual(create_welcome_message(""), "Welcome to the chat, !\n")
        self.assertEqual(create_chat_message("", "x"), ": x\n")


class TestDecodeLine(unittest.TestCase):
    """Only the first line of a read is honoured."""

    def test_strips_newline(self):
        self.assertEqual(decode_line(b"hello\n"), "hello")

    def test_keeps_only_first_line(self):
        self.assertEqual(decode_line(b"one\ntwo\nthree\n"), "one")

    def test_without_newline(self):
        self.assertEqual(decode_line(b"partial"), "partial")

    def test_empty_line(self):
        self.assertEqual(decode_line(b"\n"), "")

    def test_carriage_return_is_kept(self):
        self.assertEqual(decode_line(b"hi\r\n"), "hi\r")

    def test_invalid_utf8_is_kept(self):
        self.assertEqual(decode_line(b"a\xffb\n"), "a\udcffb")

    def test_bytes_relay_verbatim(self):
        # A multi-byte character cut off by the read boundary
        self.assertEqual(encode_message(decode_line(b"caf\xc3\n")), b"caf\xc3")
        self.assertEqual(encode_message(decode_line(b"a\xffb\n")), b"a\xffb")
        self.assertEqual(encode_message(decode_line("caf\u00e9\n".encode('utf-8'))), "caf\u00e9".encode('utf-8'))

    def test_display_replaces_invalid_bytes(self):
        self.assertEqual(to_display(decode_line(b"a\xffb")), "a\ufffdb")
        self.assertEqual(to_display("plain"), "plain")


class TestQuitCommand(unittest.TestCase):

    def test_sentinels(self):
        self.assertTrue(is_quit_command("quit"))
        self.assertTrue(is_quit_command("exit"))
        self.assertTrue(is_quit_command("  quit \n"))

    def test_case_sensitive_and_exact(self):
        self.assertFalse(is_quit_command("QUIT"))
        self.assertFalse(is_quit_command("quit now"))
        self.assertFalse(is_quit_command("exits"))


class TestValidatePort(unittest.TestCase):

    def test_valid_ports(self):
        self.assertEqual(validate_port("8080"), 8080)
        self.assertEqual(validate_port(1), 1)
        self.assertEqual(validate_port(65535), 65535)

    def test_out_of_range(self):
        for value in (0, -1, 65536, "70000"):
            with self.assertRaises(InvalidPortError):
                validate_port(value)

    def test_not_a_number(self):
        with self.assertRaises(InvalidPortError) as ctx:
            validate_port("abc")
        self.assertEqual(ctx.exception.value, "abc")

    def test_invalid_port_is_a_startup_error(self):
        with self.assertRaises(StartupError):
            validate_port(None)
        with self.assertRaises(ValueError):
            validate_port(None)


if __name__ == '__main__':
    unittest.main()
