"""
Chat module for client-side messaging functionality.

Handles:
- Sending typed lines
- Printing relayed messages
"""
