"""
Chat module for server-side messaging functionality.

Handles:
- Username claims
- Chat message broadcasting
- Join and leave notices
- Live connection tracking
"""
