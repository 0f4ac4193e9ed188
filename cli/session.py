"""
BoxDB Session
=============
Per-shell state object that owns one BoxDatabase and turns command lines
into calls on it.

Commands (verbs case-insensitive, keys case-sensitive, values are ints):
  SET key value        GET key
  DELETE key           UNSET key      (alias)
  COUNT value          COUNTS value   (alias)
  BEGIN  COMMIT  ROLLBACK  CLEAR
"""

from typing import Any, Dict, List, NamedTuple, Optional

from engine.database import BoxDatabase, NO_TRANSACTION


class CommandError(Exception):
    """Malformed command: unknown verb, wrong arity, bad value."""
    pass


class SessionError(Exception):
    """Session-level error (closed session, etc.)."""
    pass


class Result(NamedTuple):
    """Outcome of one command. has_value is set for GET / COUNT."""
    value: Any = None
    message: str = ""
    has_value: bool = False


# verb → number of arguments
_ARITY = {
    "SET": 2,
    "GET": 1,
    "DELETE": 1,
    "COUNT": 1,
    "BEGIN": 0,
    "COMMIT": 0,
    "ROLLBACK": 0,
    "CLEAR": 0,
}

_ALIASES = {
    "UNSET": "DELETE",
    "COUNTS": "COUNT",
}


def parse_command(line: str) -> List[str]:
    """
    Split a command line into [VERB, args...].
    The verb is upper-cased and aliases are resolved.
    """
    parts = line.split()
    if not parts:
        raise CommandError("Empty command")
    verb = parts[0].upper()
    verb = _ALIASES.get(verb, verb)
    if verb not in _ARITY:
        raise CommandError(f"Unknown command '{parts[0]}'")
    args = parts[1:]
    if len(args) != _ARITY[verb]:
        raise CommandError(
            f"{verb} expects {_ARITY[verb]} argument(s), got {len(args)}")
    return [verb] + args


def parse_value(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CommandError(f"Value must be an integer, got '{text}'") from None


class Session:
    """
    Shell session around one BoxDatabase.

    Usage:
        with Session() as s:
            s.execute("SET a 1")
            s.execute("GET a").value   # 1
    """

    def __init__(self, db: Optional[BoxDatabase] = None, *,
                 debug: bool = False):
        if db is None:
            db = BoxDatabase(debug=debug)
        self.db = db
        self._closed = False

        self.stats: Dict[str, int] = {
            "commands_executed": 0,
            "transactions_committed": 0,
            "rollbacks": 0,
        }

    @property
    def depth(self) -> int:
        return self.db.depth

    # ─── Execution ──────────────────────────────────────────────────

    def execute(self, line: str) -> Result:
        """Parse and run one command line."""
        self._check_closed()
        verb, *args = parse_command(line)
        self.stats["commands_executed"] += 1

        if verb == "SET":
            self.db.set(args[0], parse_value(args[1]))
            return Result()
        if verb == "GET":
            return Result(self.db.get(args[0]), "", True)
        if verb == "DELETE":
            self.db.delete(args[0])
            return Result()
        if verb == "COUNT":
            return Result(self.db.count(parse_value(args[0])), "", True)
        if verb == "BEGIN":
            self.db.begin()
            return Result()
        if verb == "COMMIT":
            return self._transaction_control(self.db.commit, "transactions_committed")
        if verb == "ROLLBACK":
            return self._transaction_control(self.db.rollback, "rollbacks")
        # CLEAR
        self.db.clear_all()
        return Result(message="Cleared.")

    def execute_script(self, text: str) -> List[Result]:
        """Run ;-separated commands. Stops at the first error (it propagates)."""
        results = []
        for line in split_commands(text):
            results.append(self.execute(line))
        return results

    def _transaction_control(self, op, stat: str) -> Result:
        # checked here so the store never writes its own diagnostic
        if not self.db.in_transaction:
            return Result(message=NO_TRANSACTION)
        op()
        self.stats[stat] += 1
        return Result()

    def _check_closed(self):
        if self._closed:
            raise SessionError("Session is closed")

    # ─── Lifecycle ──────────────────────────────────────────────────

    def close(self) -> Optional[str]:
        """
        Close the session. Pending frames are rolled back, index included.
        Returns a warning if any frames were discarded.
        """
        if self._closed:
            return None
        warning = None
        if self.db.in_transaction:
            discarded = self.db.rollback_all()
            warning = (f"WARNING: {discarded} uncommitted frame(s) "
                       f"discarded on close")
        self._closed = True
        return warning

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def split_commands(text: str) -> List[str]:
    """Split on ; and newlines, dropping blanks and lines starting with #."""
    commands = []
    for line in text.splitlines():
        if line.lstrip().startswith("#"):
            continue
        for part in line.split(";"):
            part = part.strip()
            if part:
                commands.append(part)
    return commands
