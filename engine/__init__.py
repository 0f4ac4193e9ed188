"""
BoxDB Engine
============
Facade wiring the base table, value-count index and transaction log.

Usage:
    from engine import BoxDatabase
"""

from engine.database import BoxDatabase, NO_TRANSACTION

__all__ = ["BoxDatabase", "NO_TRANSACTION"]
