"""
Server package for the LAN Chat Relay.

This package contains all server-side functionality including:
- The single-threaded connection multiplexer
- Username claims and chat broadcasting
- The connection registry
- Configuration and utilities
"""
