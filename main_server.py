#!/usr/bin/env python3
"""
LAN Chat Relay Server - Main Entry Point

Usage:
    python main_server.py [PORT]

Optional arguments:
    PORT                  TCP port to listen on (default: 8080)
    --host HOST           Bind address (default: 0.0.0.0)
    --max-clients N       Maximum number of connected clients (default: 10)
    --log-dir DIR         Directory for the chat history log (default: logs)
    --debug               Enable debug logging
"""

import argparse
import logging
import sys

from common.constants import DEFAULT_PORT, DEFAULT_SERVER_HOST, MAX_CLIENTS, LOG_DIR
from common.errors import InvalidPortError, StartupError
from server.main_server import ChatRelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='LAN Chat Relay Server')
    parser.add_argument('port', nargs='?', default=str(DEFAULT_PORT),
                        help=f'TCP port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--max-clients', type=int, default=MAX_CLIENTS,
                        help=f'Maximum number of connected clients (default: {MAX_CLIENTS})')
    parser.add_argument('--log-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the chat history log (default: {LOG_DIR})')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.debug else logging.INFO

    try:
        config = ServerConfig(host=args.host, port=args.port,
                              max_clients=args.max_clients, log_dir=args.log_dir)
    except InvalidPortError:
        logger.configure(log_level=level)
        logger.error("Error: Invalid port number")
        return 1
    except ValueError as e:
        logger.configure(log_level=level)
        logger.error(f"Error: {e}")
        return 1

    logger.configure(config.get_log_settings()['logs_dir'], level)

    server = ChatRelayServer(config)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except StartupError as e:
        logger.error(f"Error: {e}")
        return 1
    except OSError as e:
        logger.log_error("select", e)
        return 1
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
