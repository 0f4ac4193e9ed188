"""
BoxDB Transaction Frames
========================
One entry of the transaction log stack.

Kinds:
  - SAVEPOINT: marker pushed by begin(). Carries no data.
  - WRITE:     key set to value while the log is open.
  - REMOVE:    key deleted while the log is open.

Data frames record the key's effective value just before they were pushed
(shadowed_value). A frame never touches the base table on its own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Hashable, Optional


class FrameKind(Enum):
    SAVEPOINT = "SAVEPOINT"
    WRITE = "WRITE"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class Frame:
    """A savepoint marker or a recorded write/remove with undo metadata."""
    kind: FrameKind
    key: Optional[str] = None
    value: Optional[Hashable] = None          # WRITE only
    shadowed_value: Optional[Hashable] = None
    touched_keys: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def savepoint(cls) -> "Frame":
        return cls(FrameKind.SAVEPOINT)

    @classmethod
    def write(cls, key: str, value: Hashable,
              shadowed_value: Optional[Hashable]) -> "Frame":
        return cls(FrameKind.WRITE, key, value, shadowed_value, frozenset((key,)))

    @classmethod
    def remove(cls, key: str, shadowed_value: Optional[Hashable]) -> "Frame":
        return cls(FrameKind.REMOVE, key, None, shadowed_value, frozenset((key,)))

    @property
    def is_savepoint(self) -> bool:
        return self.kind is FrameKind.SAVEPOINT

    def touches(self, key: str) -> bool:
        return key in self.touched_keys

    def resolved_value(self) -> Optional[Hashable]:
        """Value this frame makes effective for its key (None for REMOVE)."""
        if self.kind is FrameKind.WRITE:
            return self.value
        return None

    def describe(self) -> str:
        if self.kind is FrameKind.SAVEPOINT:
            return "SAVEPOINT"
        if self.kind is FrameKind.WRITE:
            return f"WRITE {self.key}={self.value!r} (was {self.shadowed_value!r})"
        return f"REMOVE {self.key} (was {self.shadowed_value!r})"
