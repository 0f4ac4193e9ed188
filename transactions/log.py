"""
BoxDB Transaction Log
=====================
Flat undo stack of frames. Oldest frame at index 0, newest at the end.

Semantics:
  - begin() pushes a SAVEPOINT marker; it does not open a nested scope
  - rollback pops exactly one frame and reverses that frame's index effect
  - commit flushes every frame oldest-first into the base table, then
    clears the stack in one step (the index already reflects every frame)

Index maintenance:
  push WRITE   → +1 for the written value (the shadowed value is left alone)
  push REMOVE  → -1 for the key's effective value
  undo WRITE   → -1 for the written value
  undo REMOVE  → +1 for the shadowed value
  SAVEPOINT    → no index change either way
"""

from typing import Hashable, Iterator, List, Optional, Set

from indexing.value_index import ValueCountIndex
from storage.table import BaseTable
from transactions.frames import Frame, FrameKind


class TransactionLog:
    """
    Overlay of pending operations on top of a BaseTable.

    The log owns no committed state: it reads through to the table for keys
    no frame touches and drives the shared ValueCountIndex.
    """

    def __init__(self, table: BaseTable, index: ValueCountIndex):
        self._table = table
        self._index = index
        self._frames: List[Frame] = []

    # ─── Resolution ──────────────────────────────────────────────────────

    def resolve(self, key: str) -> Optional[Hashable]:
        """
        Effective value of key: the newest frame touching it decides,
        otherwise the base table.
        """
        for frame in reversed(self._frames):
            if frame.touches(key):
                return frame.resolved_value()
        return self._table.get(key)

    def touches(self, key: str) -> bool:
        """True if any pending frame touches key."""
        return any(frame.touches(key) for frame in self._frames)

    def keys(self) -> Set[str]:
        """Every key touched by a pending frame."""
        touched: Set[str] = set()
        for frame in self._frames:
            touched.update(frame.touched_keys)
        return touched

    # ─── Push ────────────────────────────────────────────────────────────

    def push_savepoint(self) -> Frame:
        frame = Frame.savepoint()
        self._frames.append(frame)
        return frame

    def push_write(self, key: str, value: Hashable) -> Frame:
        shadowed = self.resolve(key)
        frame = Frame.write(key, value, shadowed)
        self._index.increment(value)
        self._frames.append(frame)
        return frame

    def push_remove(self, key: str) -> Frame:
        current = self.resolve(key)
        self._index.decrement(current)
        frame = Frame.remove(key, current)
        self._frames.append(frame)
        return frame

    # ─── Pop / flush ─────────────────────────────────────────────────────

    def pop(self) -> Frame:
        """
        Pop the newest frame and reverse its index effect.
        Raises IndexError on an empty log (callers check first).
        """
        frame = self._frames.pop()
        self._undo(frame)
        return frame

    def flush(self) -> int:
        """
        Apply every frame oldest-first to the base table and clear the stack.
        Later frames for the same key overwrite earlier ones.
        Returns the number of data frames applied.
        """
        applied = 0
        for frame in self._frames:
            if frame.kind is FrameKind.WRITE:
                self._table.put(frame.key, frame.value)
                applied += 1
            elif frame.kind is FrameKind.REMOVE:
                self._table.tombstone(frame.key)
                applied += 1
        self._frames.clear()
        return applied

    def clear(self) -> None:
        """Drop every frame without running undo logic."""
        self._frames.clear()

    def _undo(self, frame: Frame) -> None:
        if frame.kind is FrameKind.WRITE:
            self._index.decrement(frame.value)
        elif frame.kind is FrameKind.REMOVE:
            self._index.increment(frame.shadowed_value)
        # SAVEPOINT: nothing to undo

    # ─── Introspection ───────────────────────────────────────────────────

    def top(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(tuple(self._frames))
