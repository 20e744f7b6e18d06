"""
Client package for the LAN Chat Relay.

This package contains the terminal chat session and its
configuration and logging utilities.
"""
