"""Interactive loop and batch entry point.

The entry point picks a mode once:

    - **Batch** — the process was started with arguments.  They are
      the token sequence for exactly one dispatch; nothing is read
      from stdin and no prompt is shown.
    - **Interactive** — no arguments.  Print a banner, then loop:
      prompt, read a line, tokenize, dispatch, and stop when a command
      returns ``TERMINATE`` or input runs out.

Exit statuses:
    - ``0`` — ``end``, end of input, or any batch dispatch.
    - ``1`` — the working directory could not be determined at
      startup, or a command raised ``FatalError``.
    - ``130`` — interrupted with Ctrl+C.

The helpers (``format_banner``, ``run_batch``, ``run_interactive``)
take their collaborators as arguments and are tested in isolation;
``main()`` wires them to the real process.
"""

import os
import sys
from collections.abc import Callable, Sequence
from typing import TextIO, TypeAlias

from termemu.commands import Outcome
from termemu.errors import EXIT_FAILURE, FatalError
from termemu.logging import LogLevel
from termemu.shell import Shell
from termemu.tokenizer import tokenize

PROMPT = ":> "
EXIT_SUCCESS = 0
EXIT_INTERRUPTED = 130

LineReader: TypeAlias = Callable[[str], str]


def format_banner(cwd: str, command_names: Sequence[str]) -> str:
    """Build the startup banner for interactive mode.

    Args:
        cwd: The working directory at startup.
        command_names: The commands to advertise.

    Returns:
        A string suitable for printing to the console.

    """
    return (
        "\nTerminal Successfully Started!\n"
        f"Try Commands: {', '.join(command_names)}\n"
        f"Currently in: {cwd}"
    )


def run_batch(shell: Shell, tokens: Sequence[str]) -> int:
    """Dispatch one token sequence and return the exit status.

    Both outcomes map to success: the command ran to completion.
    """
    shell.dispatch(tuple(tokens))
    return EXIT_SUCCESS


def run_interactive(
    shell: Shell,
    *,
    read_line: LineReader = input,
    prompt: str = PROMPT,
) -> int:
    """Run the read-dispatch loop until a command terminates it.

    Args:
        shell: The dispatcher.
        read_line: Called with the prompt; returns one line or raises
            ``EOFError`` at end of input.
        prompt: The prompt text.

    Returns:
        The exit status.

    """
    while True:
        try:
            line = read_line(prompt)
        except EOFError:
            # Ctrl+D
            print()  # noqa: T201
            shell.logger.log(LogLevel.INFO, "end of input", source="repl")
            return EXIT_SUCCESS

        if shell.dispatch(tokenize(line)) is Outcome.TERMINATE:
            return EXIT_SUCCESS


def _report_fatal(shell: Shell, error: FatalError, stderr: TextIO) -> int:
    entry = shell.logger.log(LogLevel.ERROR, str(error), source=error.source)
    print(entry, file=stderr)  # noqa: T201
    return error.status


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interpreter and return the process exit status.

    Args:
        argv: The full argument vector, program name first.  Defaults
            to ``sys.argv``.

    """
    args = list(sys.argv if argv is None else argv)[1:]

    try:
        cwd = os.getcwd()
    except OSError as e:
        print(f"Error Status {e.errno}", file=sys.stderr)  # noqa: T201
        print(e.strerror, file=sys.stderr)  # noqa: T201
        return EXIT_FAILURE

    shell = Shell()
    shell.logger.log(LogLevel.DEBUG, f"started in {cwd}", source="repl")

    try:
        if args:
            return run_batch(shell, args)
        print(format_banner(cwd, shell.command_names))  # noqa: T201
        return run_interactive(shell)
    except FatalError as e:
        return _report_fatal(shell, e, sys.stderr)
    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201
        return EXIT_INTERRUPTED


def run() -> None:
    """Console-script entry point: run ``main()`` and exit with its status."""
    sys.exit(main())
