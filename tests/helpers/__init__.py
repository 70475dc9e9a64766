"""
Test helper utilities.

Contains shared utilities for tests:
- servers: recording Server implementations
- runner: runs an engine on a background thread
"""
