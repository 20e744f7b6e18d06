#!/usr/bin/env python3
"""
LAN Chat Relay Client - Main Entry Point

Usage:
    python main_client.py [ADDRESS] [PORT]

Arguments:
    ADDRESS      Server IPv4 address (default: 127.0.0.1)
    PORT         Server port (default: 8080)

Type 'quit' or 'exit' to leave the chat.
"""

import argparse
import sys

from client.chat.chat_client import ChatSession
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import DEFAULT_HOST, DEFAULT_PORT
from common.errors import ConnectionFailedError, InvalidPortError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='LAN Chat Relay Client')
    parser.add_argument('address', nargs='?', default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('port', nargs='?', default=str(DEFAULT_PORT),
                        help=f'Server port (default: {DEFAULT_PORT})')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = ClientConfig(args.address, args.port)
    except InvalidPortError:
        logger.error("Error: Invalid port number")
        return 1

    session = ChatSession(config)
    try:
        session.connect()
        session.run()
    except ConnectionFailedError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
