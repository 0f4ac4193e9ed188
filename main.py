"""
BoxDB — In-Memory Key/Value Store
=================================
Entry point for the shell.

Usage:
    python main.py [options]

Options:
    --help              Show help
    --execute CMDS      Execute ;-separated commands and exit
    --file PATH         Execute a command script and exit
    --debug             Trace transaction control to stderr

Default:
    Interactive REPL mode
"""

import os
import sys


def print_help():
    print("""
BoxDB — In-Memory Key/Value Store

Usage:
    python main.py                         Interactive REPL
    python main.py --execute "SET a 1; GET a"   Execute commands
    python main.py --file script.box       Execute command script

Options:
    --help          Show this help
    --execute CMDS  Execute commands and exit
    --file PATH     Execute script and exit (one command per line, # comments)
    --debug         Print DEBUG_TXN traces to stderr

Commands:
    SET key value | GET key | DELETE key | COUNT value
    BEGIN | ROLLBACK | COMMIT | CLEAR | END
""")


def execute_commands(text: str, debug: bool = False) -> int:
    """
    Run commands from text against a fresh store.

    Errors stop execution and return exit status 1.
    END stops execution early.
    """
    from cli.session import Session, split_commands
    from cli.renderer import Renderer

    renderer = Renderer()

    with Session(debug=debug) as session:
        for command in split_commands(text):
            if command.upper() == "END":
                break
            try:
                renderer.render_result(session.execute(command))
            except Exception as e:
                renderer.render_error(e)
                print(f"Error in command: {command[:80]}", file=sys.stderr)
                return 1
    return 0


def execute_script(script_path: str, debug: bool = False) -> int:
    if not os.path.isfile(script_path):
        print(f"Error: script file not found: {script_path}", file=sys.stderr)
        return 1

    with open(script_path, "r", encoding="utf-8") as f:
        content = f.read()

    return execute_commands(content, debug)


def main(argv=None) -> int:
    """Parse CLI arguments and dispatch."""
    args = sys.argv[1:] if argv is None else list(argv)

    if "--help" in args or "-h" in args:
        print_help()
        return 0

    execute_text = None
    script_file = None
    debug = False

    i = 0
    while i < len(args):
        if args[i] == "--execute" and i + 1 < len(args):
            execute_text = args[i + 1]
            i += 2
        elif args[i] == "--file" and i + 1 < len(args):
            script_file = args[i + 1]
            i += 2
        elif args[i] == "--debug":
            debug = True
            i += 1
        else:
            print(f"Unknown option: {args[i]}", file=sys.stderr)
            print_help()
            return 1

    if execute_text is not None:
        return execute_commands(execute_text, debug)
    if script_file is not None:
        return execute_script(script_file, debug)

    from cli.session import Session
    from cli.repl import REPL
    REPL(Session(debug=debug)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
