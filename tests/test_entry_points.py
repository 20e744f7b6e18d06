#!/usr/bin/env python3
"""
Unit tests for the command-line entry points and configuration classes.
"""

import logging
import tempfile
import unittest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main_client
import main_server
from client.utils.config import ClientConfig
from client.utils.logger import logger as client_logger
from common.errors import BindError, InvalidPortError
from server.utils.config import ServerConfig
from server.utils.logger import logger as server_logger


class TestServerEntryPoint(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        # main() reconfigures the logger; keep it quiet afterwards too
        self.addCleanup(server_logger.configure, self.tmpdir.name, logging.CRITICAL)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_defaults(self):
        args = main_server.build_parser().parse_args([])
        self.assertEqual(args.port, '8080')
        self.assertEqual(args.host, '0.0.0.0')
        self.assertEqual(args.max_clients, 10)

    def test_invalid_port_exits_non_zero(self):
        for port in ('0', '65536', 'abc', '-5'):
            with patch('main_server.ChatRelayServer') as server_cls:
                self.assertEqual(main_server.main([port, '--log-dir', self.tmpdir.name]), 1)
                server_cls.assert_not_called()

    def test_startup_failure_exits_non_zero(self):
        with patch('main_server.ChatRelayServer') as server_cls:
            server_cls.return_value.serve_forever.side_effect = BindError("port in use")
            self.assertEqual(main_server.main(['9000', '--log-dir', self.tmpdir.name]), 1)
            server_cls.return_value.close.assert_called_once()

    def test_ctrl_c_shuts_down_cleanly(self):
        with patch('main_server.ChatRelayServer') as server_cls:
            server_cls.return_value.serve_forever.side_effect = KeyboardInterrupt
            self.assertEqual(main_server.main(['9000', '--log-dir', self.tmpdir.name]), 0)
            server_cls.return_value.close.assert_called_once()

    def test_config_is_passed_through(self):
        with patch('main_server.ChatRelayServer') as server_cls:
            server_cls.return_value.serve_forever.side_effect = KeyboardInterrupt
            main_server.main(['9001', '--host', '127.0.0.1', '--max-clients', '3',
                              '--log-dir', self.tmpdir.name])

            config = server_cls.call_args.args[0]
            self.assertEqual(config.port, 9001)
            self.assertEqual(config.host, '127.0.0.1')
            self.assertEqual(config.max_clients, 3)
            self.assertEqual(server_logger.logs_dir, Path(config.get_log_settings()['logs_dir']))
            self.assertEqual(server_logger.chat_log_path, Path(self.tmpdir.name, 'chat_history.log'))


class TestClientEntryPoint(unittest.TestCase):

    def setUp(self):
        client_logger.set_level(logging.CRITICAL)

    def test_defaults(self):
        args = main_client.build_parser().parse_args([])
        self.assertEqual(args.address, '127.0.0.1')
        self.assertEqual(args.port, '8080')

    def test_invalid_port_exits_non_zero(self):
        with patch('main_client.ChatSession') as session_cls:
            self.assertEqual(main_client.main(['127.0.0.1', '99999']), 1)
            session_cls.assert_not_called()

    def test_connection_failure_exits_non_zero(self):
        self.assertEqual(main_client.main(['not-an-ip', '8080']), 1)

    def test_session_runs(self):
        with patch('main_client.ChatSession') as session_cls:
            self.assertEqual(main_client.main(['10.0.0.5', '7000']), 0)

            config = session_cls.call_args.args[0]
            self.assertEqual(config.get_connection_info(), {'host': '10.0.0.5', 'port': 7000})
            session_cls.return_value.connect.assert_called_once()
            session_cls.return_value.run.assert_called_once()


class TestConfig(unittest.TestCase):

    def test_server_config_defaults(self):
        config = ServerConfig()
        self.assertEqual(config.get_connection_info(),
                         {'host': '0.0.0.0', 'port': 8080, 'max_clients': 10})
        self.assertEqual(config.buffer_size, 1024)
        self.assertEqual(config.get_log_settings(), {'logs_dir': 'logs'})

    def test_server_config_allows_ephemeral_port(self):
        self.assertEqual(ServerConfig(port=0).port, 0)

    def test_server_config_rejects_bad_values(self):
        with self.assertRaises(InvalidPortError):
            ServerConfig(port=70000)
        with self.assertRaises(ValueError):
            ServerConfig(max_clients=0)

    def test_client_config(self):
        self.assertEqual(ClientConfig().get_connection_info(), {'host': '127.0.0.1', 'port': 8080})
        with self.assertRaises(InvalidPortError):
            ClientConfig(port=0)


if __name__ == '__main__':
    unittest.main()
