"""Interactive shell and command-line entry point for the Maglev simulator."""

import enum
import os
import re
import sys
from typing import Optional, TextIO

from .maglev import MaglevError, MaglevTable

PROGRAM_NAME = "maglev-simulator"
MAX_ARGS = 10
HISTORY_FILE_NAME = ".maglev_history"
HISTORY_LENGTH = 100
UINT32_MAX = 0xFFFFFFFF

COMMANDS = (
    "init",
    "add",
    "del",
    "show",
    "help",
    "quit",
    "exit",
    "nodes",
    "maglev",
    "maglev-color",
)

SHOW_USAGE = "Usage: show <nodes|maglev|maglev-color>"
_INTEGER = re.compile(r"\s*[+-]?\d+")


class CommandType(enum.Enum):
    """Kinds of shell command."""

    INIT = "init"
    ADD_NODE = "add"
    DEL_NODE = "del"
    SHOW = "show"
    HELP = "help"
    QUIT = "quit"
    UNKNOWN = "unknown"


class FileResult(enum.Enum):
    """Outcome of running a command file."""

    CONTINUE = "continue"
    QUIT = "quit"
    ERROR = "error"


def parse_arguments(line: str) -> list[str]:
    """Split a command line into at most nine words."""
    return re.split(r"[ \t\n]+", line.strip(" \t\n"))[: MAX_ARGS - 1] if line.strip(" \t\n") else []


def identify_command(word: str) -> CommandType:
    """Return the command type named by ``word``."""
    if word == "exit":
        return CommandType.QUIT
    if word == CommandType.UNKNOWN.value:
        return CommandType.UNKNOWN
    try:
        return CommandType(word)
    except ValueError:
        return CommandType.UNKNOWN


def complete_command(text: str, line_buffer: str) -> list[str]:
    """Return the command words completing ``text``.

    ``line_buffer`` is the input line up to the cursor.  Completion is offered
    for the first word, and for any word after ``show ``.
    """
    start = len(line_buffer) - len(text)
    if start == 0 or (start > 0 and line_buffer.startswith("show ")):
        return [name for name in COMMANDS if name.startswith(text)]
    return []


def help_text() -> str:
    """Return the shell's help message."""
    return (
        "\nGoogle Maglev Simulator Commands:\n"
        "  init <size>          - Initialize lookup table with given size\n"
        "  add <name>           - Add a new node (error if exists)\n"
        "  del <name>           - Delete a node (ignore if not exists)\n"
        "  show nodes           - Show current nodes\n"
        "  show maglev          - Show complete maglev lookup table\n"
        "  show maglev-color    - Show maglev lookup table with colored nodes\n"
        "  help                 - Show this help message\n"
        "  quit/exit            - Exit the simulator\n"
        "\nExample:\n"
        "  > init 37\n"
        "  > add server1\n"
        "  > add server2\n"
        "  > show nodes\n"
        "  > show maglev\n"
        "  > show maglev-color\n"
        "  > del server1\n"
        "\n"
    )


def usage_text(program_name: str) -> str:
    """Return the command-line usage message."""
    return (
        f"Usage: {program_name} [OPTIONS] [COMMAND]\n"
        "\nOptions:\n"
        "  -C <file>    Execute commands from file, then continue interactively\n"
        "               if the file doesn't end with 'quit'\n"
        "  -h, --help   Show this help message\n"
        "\nExamples:\n"
        f"  {program_name}                                  # Interactive mode\n"
        f"  {program_name} help                             # Execute single command\n"
        f"  {program_name} -C scripts/batch_commands.txt    # Execute commands from file\n"
        "\nFile format:\n"
        "  # This is a comment\n"
        "  init 37\n"
        "  add node server1\n"
        "  show nodes\n"
        "  # If no 'quit' at end, continues to interactive mode\n"
    )


def _parse_table_size(word: str) -> Optional[int]:
    if not _INTEGER.fullmatch(word):
        return None
    size = int(word)
    if size <= 0 or size > UINT32_MAX:
        return None
    return size


class Shell:
    """Command interpreter holding the current lookup table."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self._out = out
        self.table: Optional[MaglevTable] = None

    def _print(self, text: str = "", end: str = "\n") -> None:
        stream = self._out if self._out is not None else sys.stdout
        stream.write(text + end)

    def _handle_init(self, args: list[str]) -> None:
        if len(args) != 2:
            self._print("Usage: init <table_size>")
            return
        size = _parse_table_size(args[1])
        if size is None:
            self._print(f"Error: Invalid table size '{args[1]}'")
            return
        self.table = None
        try:
            self.table = MaglevTable(size)
        except MemoryError:
            self._print("Error: Failed to initialize Maglev table")
            return
        self._print(f"Maglev table initialized with size: {self.table.table_size}")

    def _handle_add(self, args: list[str]) -> None:
        if len(args) != 2:
            self._print("Usage: add <node_name>")
            return
        if self.table is None:
            self._print("Error: Maglev table not initialized")
            return
        name = args[1]
        try:
            self.table.add_node(name)
        except MaglevError as exc:
            self._print(f"Error: {exc}")
            return
        self._print(f"Node '{name}' added successfully")

    def _handle_del(self, args: list[str]) -> None:
        if len(args) != 2:
            self._print("Usage: del <node_name>")
            return
        if self.table is None:
            self._print("Error: Maglev table not initialized")
            return
        name = args[1]
        if self.table.remove_node(name):
            self._print(f"Node '{name}' removed successfully")
        else:
            self._print(f"Node '{name}' does not exist (ignored)")

    def _handle_show(self, args: list[str]) -> None:
        if len(args) != 2 or args[1] not in ("nodes", "maglev", "maglev-color"):
            self._print(SHOW_USAGE)
            return
        if self.table is None:
            self._print("Maglev table not initialized")
            return
        if args[1] == "nodes":
            self._print(self.table.render_nodes(), end="")
        else:
            self._print(self.table.render_table(args[1] == "maglev-color"), end="")

    def process_command(self, line: str) -> Optional[CommandType]:
        """Run one command line; return its type, or None for an empty line."""
        args = parse_arguments(line)
        if not args:
            return None
        command = identify_command(args[0])
        if command is CommandType.INIT:
            self._handle_init(args)
        elif command is CommandType.ADD_NODE:
            self._handle_add(args)
        elif command is CommandType.DEL_NODE:
            self._handle_del(args)
        elif command is CommandType.SHOW:
            self._handle_show(args)
        elif command is CommandType.HELP:
            self._print(help_text(), end="")
        elif command is CommandType.QUIT:
            self._print("Goodbye!")
        else:
            self._print(f"Unknown command: {args[0]}")
            self._print("Type 'help' for available commands.")
        return command

    def execute_file(self, path: str) -> FileResult:
        """Run the commands in ``path``, skipping blank lines and ``#`` comments."""
        try:
            handle = open(path, encoding="utf-8", errors="replace")
        except OSError:
            self._print(f"Error: Cannot open file '{path}'")
            return FileResult.ERROR
        self._print(f"Executing commands from file: {path}")
        with handle:
            for raw in handle:
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                self._print(f"> {line}")
                if self.process_command(line) is CommandType.QUIT:
                    return FileResult.QUIT
        return FileResult.CONTINUE

    def run_interactive(self) -> None:
        """Read and run commands from the terminal until quit or end of input."""
        history_file = None
        home = os.environ.get("HOME")
        if home:
            history_file = os.path.join(home, HISTORY_FILE_NAME)
        readline = _setup_readline(history_file)
        try:
            while True:
                try:
                    line = input("> ")
                except EOFError:
                    self._print("\nGoodbye!")
                    return
                line = line.strip()
                if line and readline is not None:
                    readline.add_history(line)
                if self.process_command(line) is CommandType.QUIT:
                    return
        finally:
            if readline is not None and history_file is not None:
                try:
                    readline.write_history_file(history_file)
                except OSError:
                    pass


def _setup_readline(history_file: Optional[str]):
    try:
        import readline
    except ImportError:
        return None
    if history_file is not None:
        try:
            readline.read_history_file(history_file)
        except OSError:
            pass
    readline.set_history_length(HISTORY_LENGTH)

    def completer(text: str, state: int) -> Optional[str]:
        buffer = readline.get_line_buffer()[: readline.get_endidx()]
        matches = complete_command(text, buffer)
        return matches[state] if state < len(matches) else None

    readline.set_completer(completer)
    if "libedit" in (readline.__doc__ or ""):
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
    return readline


def main(argv: Optional[list[str]] = None) -> int:
    """Run the simulator; return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    shell = Shell()
    print("Google Maglev Simulator")

    command_file: Optional[str] = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "-C":
            if i + 1 < len(args):
                command_file = args[i + 1]
                i += 2
                continue
            print("Error: -C option requires a filename")
            print(usage_text(PROGRAM_NAME), end="")
            return 1
        if arg in ("-h", "--help"):
            print(usage_text(PROGRAM_NAME), end="")
            return 0
        command = " ".join(args[i:])
        print("Type 'help' for available commands, 'quit' to exit.")
        print("Use UP/DOWN arrows to navigate command history.\n")
        print(f"Executing: {command}")
        shell.process_command(command)
        return 0

    print("Type 'help' for available commands, 'quit' to exit.")
    print("Use UP/DOWN arrows to navigate command history.")
    if command_file is not None:
        print("Use -h for command line options.")
    print()

    if command_file is not None:
        result = shell.execute_file(command_file)
        if result is FileResult.ERROR:
            return 1
        if result is FileResult.QUIT:
            return 0
        print("\n--- Entering interactive mode ---")

    shell.run_interactive()
    return 0


if __name__ == "__main__":
    sys.exit(main())