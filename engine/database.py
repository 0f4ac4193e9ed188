"""
BoxDB Database Facade
=====================
Public surface of the store: get / set / delete / count, begin / commit /
rollback, clear_all.

Routing:
  - Empty transaction log: mutations go straight to the base table.
  - Non-empty log: mutations become frames; reads resolve through them.

Quirks kept on purpose:
  - set() always increments the count of the new value and never
    decrements the value it overwrites. delete() does decrement.
  - Committing a delete leaves a tombstone in the base table, while a
    delete with no open log removes the key.

Single-threaded: no locking.
"""

import sys
from typing import Hashable, List, Optional, TextIO, Tuple

from indexing.value_index import ValueCountIndex
from storage.table import BaseTable
from transactions.frames import Frame
from transactions.log import TransactionLog


NO_TRANSACTION = "NO TRANSACTION"


def _check_key(key) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Key must be str, got {type(key).__name__}")


class BoxDatabase:
    """
    In-memory key/value store with a value-count index and an undo log.

    Usage:
        db = BoxDatabase()
        db.set("a", 1)
        db.begin()
        db.delete("a")
        db.rollback()      # undoes the delete only
        db.rollback()      # pops the savepoint
    """

    def __init__(self, output: TextIO = None, debug: bool = False):
        self.output = output or sys.stdout
        self.debug = debug
        self._table = BaseTable()
        self._index = ValueCountIndex()
        self._log = TransactionLog(self._table, self._index)

    # ─── Queries ─────────────────────────────────────────────────────────

    def get(self, key: str) -> Optional[Hashable]:
        if self._log.touches(key):
            return self._log.resolve(key)
        return self._table.get(key)

    def count(self, value: Hashable) -> Optional[int]:
        """Keys currently holding value, or None if value was never seen."""
        return self._index.count(value)

    # ─── Mutations ───────────────────────────────────────────────────────

    def set(self, key: str, value: Hashable) -> None:
        _check_key(key)
        if value is None:
            raise ValueError("None is reserved for unset keys; use delete()")
        # unhashable values must fail before anything is written
        hash(value)
        if not self._log:
            self._table.put(key, value)
            self._index.increment(value)
        else:
            self._log.push_write(key, value)

    def delete(self, key: str) -> None:
        _check_key(key)
        if not self._log:
            self._index.decrement(self._table.get(key))
            self._table.remove(key)
        else:
            self._log.push_remove(key)

    # ─── Transaction control ─────────────────────────────────────────────

    def begin(self) -> None:
        self._log.push_savepoint()
        self._trace(f"begin (depth={len(self._log)})")

    def commit(self) -> bool:
        """
        Flush every pending frame into the base table.
        Returns False (and reports NO TRANSACTION) when nothing is pending.
        """
        if not self._log:
            self._report(NO_TRANSACTION)
            return False
        depth = len(self._log)
        applied = self._log.flush()
        self._trace(f"commit {applied} data frame(s) of {depth}")
        return True

    def rollback(self) -> bool:
        """
        Undo exactly one frame, the newest.
        Returns False (and reports NO TRANSACTION) when nothing is pending.
        """
        if not self._log:
            self._report(NO_TRANSACTION)
            return False
        frame = self._log.pop()
        self._trace(f"rollback {frame.describe()} (depth={len(self._log)})")
        return True

    def rollback_all(self) -> int:
        """Undo every pending frame, newest first. Returns the number popped."""
        popped = 0
        while self._log:
            self._log.pop()
            popped += 1
        if popped:
            self._trace(f"rollback_all {popped} frame(s)")
        return popped

    def clear_all(self) -> None:
        """Hard reset: log, table and index. No undo logic runs."""
        self._log.clear()
        self._table.clear()
        self._index.clear()

    # ─── Introspection ───────────────────────────────────────────────────

    @property
    def in_transaction(self) -> bool:
        return bool(self._log)

    @property
    def depth(self) -> int:
        """Number of pending frames, savepoints included."""
        return len(self._log)

    def frames(self) -> Tuple[Frame, ...]:
        """Snapshot of the log, oldest first."""
        return tuple(self._log)

    def items(self) -> List[Tuple[str, Hashable]]:
        """Sorted (key, effective value) pairs, unset keys and tombstones skipped."""
        keys = set(self._table.keys()) | self._log.keys()
        result = []
        for key in sorted(keys):
            value = self.get(key)
            if value is not None:
                result.append((key, value))
        return result

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self.items())

    # ─── Diagnostics ─────────────────────────────────────────────────────

    def _report(self, message: str) -> None:
        print(message, file=self.output)

    def _trace(self, message: str) -> None:
        if self.debug:
            print(f"DEBUG_TXN: {message}", file=sys.stderr)
