"""
BoxDB Shell Tests
=================
Session command parsing and execution, Renderer output, REPL line
handling, and the main.py entry point.
"""

import io
import os
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout, redirect_stderr

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli.session import (
    Session, SessionError, CommandError, Result, parse_command, split_commands,
)
from cli.renderer import Renderer
from cli.repl import REPL
from engine.database import BoxDatabase, NO_TRANSACTION
import main


# ═══════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════

class TestParsing(unittest.TestCase):

    def test_verbs_case_insensitive(self):
        self.assertEqual(parse_command("set a 1"), ["SET", "a", "1"])
        self.assertEqual(parse_command("Begin"), ["BEGIN"])

    def test_aliases(self):
        self.assertEqual(parse_command("UNSET a"), ["DELETE", "a"])
        self.assertEqual(parse_command("counts 3"), ["COUNT", "3"])

    def test_unknown_verb(self):
        with self.assertRaises(CommandError):
            parse_command("FROB a")

    def test_wrong_arity(self):
        with self.assertRaises(CommandError):
            parse_command("SET a")
        with self.assertRaises(CommandError):
            parse_command("COMMIT now")

    def test_empty(self):
        with self.assertRaises(CommandError):
            parse_command("   ")

    def test_split_commands(self):
        text = "SET a 1; GET a\n# comment\n\n   # indented comment\nBEGIN\n"
        self.assertEqual(split_commands(text), ["SET a 1", "GET a", "BEGIN"])

    def test_hash_inside_key_is_kept(self):
        """Only a line starting with # is a comment."""
        self.assertEqual(split_commands("SET a#b 1; GET a#b"),
                         ["SET a#b 1", "GET a#b"])
        session = Session()
        session.execute_script("SET a#b 1")
        self.assertEqual(session.execute("GET a#b").value, 1)


# ═══════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════

class TestSession(unittest.TestCase):

    def setUp(self):
        self.session = Session()

    def tearDown(self):
        self.session.close()

    def test_set_get_count(self):
        self.assertEqual(self.session.execute("SET a 10"), Result())
        result = self.session.execute("GET a")
        self.assertTrue(result.has_value)
        self.assertEqual(result.value, 10)
        self.assertEqual(self.session.execute("COUNT 10").value, 1)

    def test_get_missing_is_none(self):
        result = self.session.execute("GET nope")
        self.assertTrue(result.has_value)
        self.assertIsNone(result.value)

    def test_keys_case_sensitive(self):
        self.session.execute("SET a 1")
        self.assertIsNone(self.session.execute("GET A").value)

    def test_bad_value(self):
        with self.assertRaises(CommandError):
            self.session.execute("SET a one")
        with self.assertRaises(CommandError):
            self.session.execute("COUNT x")

    def test_transaction_flow(self):
        self.session.execute_script("SET a 1; BEGIN; SET a 2; DELETE a")
        self.assertEqual(self.session.depth, 3)
        self.session.execute("ROLLBACK")
        self.assertEqual(self.session.execute("GET a").value, 2)
        self.session.execute("COMMIT")
        self.assertEqual(self.session.depth, 0)
        self.assertEqual(self.session.stats["transactions_committed"], 1)
        self.assertEqual(self.session.stats["rollbacks"], 1)

    def test_no_transaction_message(self):
        result = self.session.execute("ROLLBACK")
        self.assertEqual(result.message, NO_TRANSACTION)
        self.assertFalse(result.has_value)
        result = self.session.execute("COMMIT")
        self.assertEqual(result.message, NO_TRANSACTION)
        self.assertEqual(self.session.stats["rollbacks"], 0)

    def test_clear(self):
        self.session.execute_script("SET a 1; BEGIN; SET b 1")
        result = self.session.execute("CLEAR")
        self.assertEqual(result.message, "Cleared.")
        self.assertIsNone(self.session.execute("COUNT 1").value)
        self.assertEqual(self.session.depth, 0)

    def test_stats_count_commands(self):
        self.session.execute("SET a 1")
        self.session.execute("GET a")
        self.assertEqual(self.session.stats["commands_executed"], 2)

    def test_close_warns_on_pending_frames(self):
        session = Session()
        session.execute("BEGIN")
        session.execute("SET a 1")
        warning = session.close()
        self.assertIn("2 uncommitted frame(s)", warning)
        self.assertIsNone(session.close())

    def test_close_rolls_back_external_db(self):
        db = BoxDatabase(output=io.StringIO())
        db.set("a", 5)
        session = Session(db)
        session.execute_script("BEGIN; SET a 1; DELETE a")
        warning = session.close()
        self.assertIn("3 uncommitted frame(s)", warning)
        self.assertFalse(db.in_transaction)
        self.assertEqual(db.get("a"), 5)
        self.assertEqual(db.count(1), 0)
        self.assertEqual(db.count(5), 1)

    def test_no_transaction_reported_once(self):
        """The message is returned, the store's own stream stays empty."""
        out = io.StringIO()
        session = Session(BoxDatabase(output=out))
        result = session.execute("ROLLBACK")
        self.assertEqual(result.message, NO_TRANSACTION)
        self.assertEqual(session.execute("COMMIT").message, NO_TRANSACTION)
        self.assertEqual(out.getvalue(), "")

    def test_closed_session_raises(self):
        with Session() as session:
            pass
        with self.assertRaises(SessionError):
            session.execute("GET a")


# ═══════════════════════════════════════════════════════════════════════════
# Renderer
# ═══════════════════════════════════════════════════════════════════════════

class TestRenderer(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.renderer = Renderer(self.out)

    def test_value_and_null(self):
        self.renderer.render_result(Result(5, "", True))
        self.renderer.render_result(Result(None, "", True))
        self.assertEqual(self.out.getvalue().splitlines(), ["5", "NULL"])

    def test_mutation_is_silent(self):
        self.renderer.render_result(Result())
        self.assertEqual(self.out.getvalue(), "")

    def test_message(self):
        self.renderer.render_result(Result(message=NO_TRANSACTION))
        self.assertEqual(self.out.getvalue().strip(), NO_TRANSACTION)

    def test_timer(self):
        self.renderer.show_timer = True
        self.renderer.render_result(Result(), elapsed=0.5)
        self.assertIn("(0.500000s)", self.out.getvalue())

    def test_error_classification(self):
        self.renderer.render_error(CommandError("bad"))
        self.renderer.render_error(SessionError("closed"))
        self.renderer.render_error(TypeError("key"))
        self.renderer.render_error(RuntimeError("boom"))
        lines = self.out.getvalue().splitlines()
        self.assertEqual(lines[0], "SyntaxError: bad")
        self.assertEqual(lines[1], "SessionError: closed")
        self.assertEqual(lines[2], "ExecutionError: key")
        self.assertEqual(lines[3], "Error[RuntimeError]: boom")

    def test_frames(self):
        self.renderer.render_frames([])
        self.assertIn("No pending frames.", self.out.getvalue())


# ═══════════════════════════════════════════════════════════════════════════
# REPL
# ═══════════════════════════════════════════════════════════════════════════

class TestREPL(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.repl = REPL(output=self.out)

    def test_commands_and_output(self):
        self.repl.handle_line("SET a 1; SET b 1")
        self.repl.handle_line("COUNT 1")
        self.repl.handle_line("GET zzz")
        self.assertEqual(self.out.getvalue().splitlines(), ["2", "NULL"])

    def test_prompt_shows_depth(self):
        self.assertEqual(self.repl.prompt(), "boxdb> ")
        self.repl.handle_line("BEGIN")
        self.repl.handle_line("SET a 1")
        self.assertEqual(self.repl.prompt(), "boxdb[txn:2]> ")

    def test_errors_do_not_stop_repl(self):
        self.assertTrue(self.repl.handle_line("BOGUS"))
        self.assertIn("SyntaxError", self.out.getvalue())

    def test_end_stops(self):
        self.assertFalse(self.repl.handle_line("SET a 1; END; SET b 2"))
        self.assertIsNone(self.repl.session.db.get("b"))

    def test_quit_meta(self):
        self.assertFalse(self.repl.handle_line(".quit"))

    def test_frames_meta(self):
        self.repl.handle_line("BEGIN; SET a 3")
        self.repl.handle_line(".frames")
        text = self.out.getvalue()
        self.assertIn("SAVEPOINT", text)
        self.assertIn("WRITE a=3", text)

    def test_stats_and_unknown_meta(self):
        self.repl.handle_line(".stats")
        self.repl.handle_line(".nope")
        text = self.out.getvalue()
        self.assertIn("Pending frames:", text)
        self.assertIn("Unknown command: .nope", text)

    def test_timer_meta(self):
        self.repl.handle_line(".timer on")
        self.assertTrue(self.repl.renderer.show_timer)
        self.repl.handle_line(".timer off")
        self.assertFalse(self.repl.renderer.show_timer)


# ═══════════════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════════════

class TestMain(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="boxdb_cli_test_")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_execute(self):
        code, out, _ = self._run(
            ["--execute", "SET a 1; BEGIN; DELETE a; GET a; ROLLBACK; GET a"])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["NULL", "1"])

    def test_execute_error_exits_1(self):
        code, out, err = self._run(["--execute", "SET a 1; SET a x; GET a"])
        self.assertEqual(code, 1)
        self.assertIn("SyntaxError", out)
        self.assertIn("Error in command", err)

    def test_file(self):
        path = os.path.join(self.test_dir, "script.box")
        with open(path, "w", encoding="utf-8") as f:
            f.write("# seed\nSET a 1\nSET b 1\nCOUNT 1\nROLLBACK\nEND\nGET a\n")
        code, out, _ = self._run(["--file", path])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["2", NO_TRANSACTION])

    def test_missing_file(self):
        code, _, err = self._run(["--file", os.path.join(self.test_dir, "nope")])
        self.assertEqual(code, 1)
        self.assertIn("not found", err)

    def test_unknown_option(self):
        code, _, err = self._run(["--bogus"])
        self.assertEqual(code, 1)
        self.assertIn("Unknown option", err)

    def test_help(self):
        code, out, _ = self._run(["--help"])
        self.assertEqual(code, 0)
        self.assertIn("Usage", out)

    def test_debug_traces(self):
        code, _, err = self._run(["--debug", "--execute", "BEGIN; COMMIT"])
        self.assertEqual(code, 0)
        self.assertIn("DEBUG_TXN", err)


if __name__ == "__main__":
    unittest.main()
