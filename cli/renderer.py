"""
BoxDB Result Renderer
=====================
Formats command results, frames and statistics for the shell.

  - GET / COUNT results print the value, None prints as NULL
  - Transaction-control diagnostics print verbatim (NO TRANSACTION)
  - Errors print with a classification prefix
  - Optional elapsed-time footer
"""

import sys
from typing import Any, Dict, Iterable, Optional, TextIO

from cli.session import Result


class Renderer:
    """Line-oriented renderer writing to a text stream."""

    def __init__(self, output: TextIO = None):
        self.output = output or sys.stdout
        self.show_timer: bool = False
        self.null_text: str = "NULL"

    # ─── Public API ─────────────────────────────────────────────────

    def render_result(self, result: Result, elapsed: Optional[float] = None):
        """Render one command result. Silent for plain mutations."""
        if result.has_value:
            self._print(self._format_value(result.value))
        if result.message:
            self._print(result.message)
        if self.show_timer and elapsed is not None:
            self._print(f"({elapsed:.6f}s)")

    def render_message(self, message: str):
        if message:
            self._print(message)

    def render_error(self, error: Exception):
        """Render an error with classification prefix."""
        prefix = self._classify_error(type(error).__name__)
        self._print(f"{prefix}: {error}")

    def render_frames(self, frames: Iterable):
        """List pending frames, oldest first, numbered from 0."""
        frames = list(frames)
        if not frames:
            self._print("No pending frames.")
            return
        for i, frame in enumerate(frames):
            self._print(f"  {i:>3}  {frame.describe()}")

    def render_stats(self, stats: Dict[str, int], depth: int):
        self._print("Session Statistics:")
        self._print(f"  Commands executed:      {stats['commands_executed']}")
        self._print(f"  Transactions committed: {stats['transactions_committed']}")
        self._print(f"  Rollbacks:              {stats['rollbacks']}")
        self._print(f"  Pending frames:         {depth}")

    # ─── Helpers ────────────────────────────────────────────────────

    def _format_value(self, value: Any) -> str:
        if value is None:
            return self.null_text
        return str(value)

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "CommandError": "SyntaxError",
            "SessionError": "SessionError",
            "ValueError": "ExecutionError",
            "TypeError": "ExecutionError",
            "KeyboardInterrupt": "Interrupted",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str):
        print(text, file=self.output)
