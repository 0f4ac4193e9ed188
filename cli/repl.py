"""
BoxDB Interactive REPL
======================
Interactive shell with boxdb> prompt.

Features:
  - One command per line, or several separated by ;
  - Meta-commands (dot-prefixed)
  - Prompt shows pending frame count while a transaction is open
  - Ctrl+C cancels the current line, Ctrl+D or END exits
  - Persistent readline history (~/.boxdb_history)
"""

import os
import sys
import time
from typing import Optional, TextIO

from cli.session import Session, split_commands
from cli.renderer import Renderer


# ─── History ────────────────────────────────────────────────────────
HISTORY_FILE = os.path.expanduser("~/.boxdb_history")
HISTORY_MAX = 1000

try:
    import readline
    _HAS_READLINE = True
except ImportError:
    _HAS_READLINE = False


def _load_history():
    if _HAS_READLINE and os.path.exists(HISTORY_FILE):
        try:
            readline.read_history_file(HISTORY_FILE)
        except OSError:
            pass


def _save_history():
    if _HAS_READLINE:
        try:
            readline.set_history_length(HISTORY_MAX)
            readline.write_history_file(HISTORY_FILE)
        except OSError:
            pass


HELP_TEXT = """BoxDB Commands:
  SET key value        Set key to an integer value
  GET key              Print the value of key (NULL if unset)
  DELETE key           Delete key (alias: UNSET)
  COUNT value          Print how many keys hold value (alias: COUNTS)
  BEGIN                Push a savepoint
  ROLLBACK             Undo the most recent frame (one per call)
  COMMIT               Flush every pending frame
  CLEAR                Reset the store
  END                  Exit

Meta-Commands:
  .help                Show this help
  .frames              List pending frames, oldest first
  .stats               Show session statistics
  .timer on|off        Toggle timing display
  .quit                Exit (aliases: .exit, .q)"""


# ─── REPL ───────────────────────────────────────────────────────────

class REPL:
    """
    Interactive BoxDB shell.

    Usage:
        repl = REPL()
        repl.run()
    """

    PROMPT = "boxdb> "

    def __init__(self, session: Optional[Session] = None, output: TextIO = None):
        self.session = session or Session()
        self.renderer = Renderer(output)
        self._running = True

    def prompt(self) -> str:
        if self.session.depth:
            return f"boxdb[txn:{self.session.depth}]> "
        return self.PROMPT

    def run(self):
        """Main REPL loop."""
        _load_history()
        self._running = True

        print("BoxDB v0.1.0")
        print('Type ".help" for usage hints.')
        print()

        try:
            while self._running:
                try:
                    line = input(self.prompt())
                except KeyboardInterrupt:
                    print()
                    continue
                except EOFError:
                    print()
                    break
                self.handle_line(line)
        finally:
            _save_history()
            self._shutdown()

    def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False once the shell should exit."""
        stripped = line.strip()
        if not stripped:
            return self._running

        if stripped.startswith("."):
            self._handle_meta_command(stripped)
            return self._running

        for command in split_commands(stripped):
            if command.upper() == "END":
                self._running = False
                break
            self._execute_command(command)
        return self._running

    # ─── Command Execution ──────────────────────────────────────────

    def _execute_command(self, command: str):
        start = time.perf_counter()
        try:
            result = self.session.execute(command)
        except Exception as e:
            self.renderer.render_error(e)
            return
        self.renderer.render_result(result, time.perf_counter() - start)

    # ─── Meta-Commands ──────────────────────────────────────────────

    def _handle_meta_command(self, line: str):
        parts = line.split(None, 1)
        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd in (".quit", ".exit", ".q"):
            self._running = False
        elif cmd == ".help":
            self.renderer.render_message(HELP_TEXT)
        elif cmd == ".frames":
            self.renderer.render_frames(self.session.db.frames())
        elif cmd == ".stats":
            self.renderer.render_stats(self.session.stats, self.session.depth)
        elif cmd == ".timer":
            self._cmd_timer(arg)
        else:
            self.renderer.render_message(
                f"Unknown command: {cmd}. Type .help for available commands.")

    def _cmd_timer(self, arg: str):
        if arg.lower() in ("on", "1", "true"):
            self.renderer.show_timer = True
            self.renderer.render_message("Timer ON")
        elif arg.lower() in ("off", "0", "false"):
            self.renderer.show_timer = False
            self.renderer.render_message("Timer OFF")
        else:
            self.renderer.render_message(
                f"Timer is {'ON' if self.renderer.show_timer else 'OFF'}")

    def _shutdown(self):
        warning = self.session.close()
        if warning:
            print(warning, file=sys.stderr)
        print("Goodbye.")
