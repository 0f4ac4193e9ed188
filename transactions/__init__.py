"""
BoxDB Transactions Module
=========================
Flat undo-stack transactions over the in-memory base table.

Components:
  - frames.py: Frame / FrameKind (SAVEPOINT | WRITE | REMOVE)
  - log.py: TransactionLog (resolution, push, one-frame rollback, flush)
"""

from transactions.frames import Frame, FrameKind
from transactions.log import TransactionLog

__all__ = ["Frame", "FrameKind", "TransactionLog"]
