"""
BoxDB Value-Count Index
=======================
value → number of keys currently holding that value.

Maintained incrementally by the facade and the transaction log; nothing
here scans the table. Entries that drop to 0 are kept, so a value that was
ever touched reports an int and a value never seen reports None.
"""

from typing import Dict, Hashable, Optional


class ValueCountIndex:
    """Counter keyed by value."""

    def __init__(self):
        self._counts: Dict[Hashable, int] = {}

    def increment(self, value: Optional[Hashable]) -> None:
        """Add one key holding value. None is ignored."""
        if value is None:
            return
        self._counts[value] = self._counts.get(value, 0) + 1

    def decrement(self, value: Optional[Hashable]) -> None:
        """Remove one key holding value. None is ignored."""
        if value is None:
            return
        self._counts[value] = self._counts.get(value, 0) - 1

    def count(self, value: Hashable) -> Optional[int]:
        return self._counts.get(value)

    def snapshot(self) -> Dict[Hashable, int]:
        return dict(self._counts)

    def clear(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"ValueCountIndex({self._counts!r})"
