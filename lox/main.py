"""Runs the Lox interpreter on a file, on a source string, or in command-line mode. Also uses the error handling context
manager. Called from the lox executable script.
"""

import argparse

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-c", dest="command", metavar="SOURCE", help="run SOURCE and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="print a trace line for every pipeline step")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    with ErrorHandler() as error_handler:
        args = parse_args(argv)
        error_handler.verbose = args.verbose

        if args.command is not None:
            Session(error_handler, "<string>").run(args.command)

        elif args.file is not None:
            Session(error_handler, args.file).run_file()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
