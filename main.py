import curses
import logging
import os
import sys

from config_paths import load_config
from default_df_initializer import DefaultDfInitializer
from file_type_handler import FileTypeHandler, UnsupportedFileType

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

__version__ = "0.1.0"

USAGE = (
    "tabula - interactive terminal table\n\n"
    "Usage:\n  tabula [path] [--log FILE]\n  tabula -v\n  tabula -h\n"
)


def parse_args(args):
    """Split argv into (path, log_path, flags)."""
    path = None
    log_path = None
    flags = set()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("-v", "-V", "-h"):
            flags.add(arg.lower())
        elif arg == "--log":
            if i + 1 >= len(args):
                raise ValueError("--log requires a file path")
            log_path = args[i + 1]
            i += 1
        elif arg.startswith("--log="):
            log_path = arg.split("=", 1)[1]
        elif path is None:
            path = arg
        else:
            raise ValueError(f"unexpected argument: {arg}")
        i += 1
    return path, log_path, flags


def configure_logging(log_path):
    if not log_path:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def main():
    try:
        path, log_path, flags = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"{e}\n\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    if "-v" in flags:
        print(__version__)
        return

    if "-h" in flags:
        print(USAGE)
        return

    try:
        handler = FileTypeHandler(path) if path else None
    except UnsupportedFileType as e:
        print(e, file=sys.stderr)
        sys.exit(1)

    configure_logging(log_path)
    config = load_config()

    def load_df():
        if handler:
            return handler.load_or_create()
        return DefaultDfInitializer().create()

    def curses_main(stdscr):
        Orchestrator(stdscr, load_df, path, handler, config=config).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
