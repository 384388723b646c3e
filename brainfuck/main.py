"""Uses the brainfuck interpreter to run .bf files/run in command-line mode. Also uses error handling context manager.
Called from bf executable script.
"""

import argparse

from brainfuck.lang.error import ErrorHandler
from brainfuck.lang.session import Session
from brainfuck.lang.shell import Shell
from brainfuck.pure.execution import DEFAULT_CAPACITY


def main(argv=None):
    """Runs brainfuck interpreter. Called from bf executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(description="Brainfuck interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("-m", "--memory", type=int, default=DEFAULT_CAPACITY,
                            help=f"number of memory cells (default: {DEFAULT_CAPACITY})")
        parser.add_argument("--strict-input", action="store_true",
                            help="fail when ',' is executed with no input left, instead of ignoring it")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, args.memory, cmd_line=False, strict_input=args.strict_input)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, args.memory, cmd_line=True,
                          strict_input=args.strict_input)).cmdloop()


if __name__ == "__main__":
    main()
