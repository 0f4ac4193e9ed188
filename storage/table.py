"""
BoxDB Base Table
================
Committed key → value mapping.

Tombstones:
  - Committing a Remove frame stores the key with an absent value (None)
    instead of dropping it. get() treats a tombstone like an unset key,
    keys() and __contains__ still report it.
  - A non-transactional delete removes the key outright.
"""

from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple


class BaseTable:
    """
    The committed state of the store.

    Only the facade's direct (no active log) mutations and the
    transaction log's commit flush write here.
    """

    def __init__(self):
        self._rows: Dict[str, Optional[Hashable]] = {}

    # ─── Reads ───────────────────────────────────────────────────────────

    def get(self, key: str) -> Optional[Hashable]:
        """Return the committed value for key, or None (unset or tombstone)."""
        return self._rows.get(key)

    def keys(self) -> List[str]:
        """All stored keys, tombstones included."""
        return list(self._rows)

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Live (key, value) pairs. Tombstones are skipped."""
        for key, value in self._rows.items():
            if value is not None:
                yield key, value

    def is_tombstone(self, key: str) -> bool:
        return key in self._rows and self._rows[key] is None

    def __contains__(self, key: str) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    # ─── Writes ──────────────────────────────────────────────────────────

    def put(self, key: str, value: Hashable) -> None:
        self._rows[key] = value

    def tombstone(self, key: str) -> None:
        """Keep key present with an absent value."""
        self._rows[key] = None

    def remove(self, key: str) -> Optional[Hashable]:
        """Physically drop key. Returns the removed value (None if unset)."""
        return self._rows.pop(key, None)

    def clear(self) -> None:
        self._rows.clear()

    def __repr__(self) -> str:
        return f"BaseTable(rows={len(self._rows)})"
