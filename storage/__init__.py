"""
BoxDB Storage
=============
Committed state for the in-memory store.

Usage:
    from storage import BaseTable
"""

from storage.table import BaseTable

__all__ = ["BaseTable"]
