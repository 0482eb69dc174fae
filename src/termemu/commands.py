"""Built-in commands and the command registry.

Every built-in is an object with one public operation, ``execute()``,
which takes the full token sequence (command name first) and returns
an ``Outcome``: ``CONTINUE`` to read another line, ``TERMINATE`` to
stop.  Only ``end`` ever returns ``TERMINATE``.

``Command.execute`` checks the argument count before a command sees
its arguments.  A command that is short of arguments prints its usage
message and returns ``CONTINUE`` without touching the filesystem or
sending any signal.

Failures are split by kind:
    - **Operational** (bad PID, missing directory) — reported as
      ``Error: ...`` and the loop continues.
    - **Resource** (``cp`` cannot open a file) — ``FatalError`` is
      raised and the process ends.

The registry is one tuple of ``(name, command)`` pairs built from the
commands themselves, so a name can never drift away from its handler.
"""

import os
import shutil
import signal
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, TextIO, TypeAlias

from termemu.errors import FatalError
from termemu.logging import Logger, LogLevel

# Signal number 0 checks that a process exists without affecting it.
_LIVENESS_PROBE = 0


class Outcome(Enum):
    """What the loop should do after a command returns."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


@dataclass
class CommandContext:
    """Where a command writes its output and records its failures."""

    stdout: TextIO
    logger: Logger = field(default_factory=Logger)

    def write(self, message: str) -> None:
        """Write one line of output."""
        print(message, file=self.stdout)  # noqa: T201

    def report(self, message: str, *, source: str) -> None:
        """Write an ``Error:`` line and log it as a warning."""
        self.write(f"Error: {message}")
        self.logger.log(LogLevel.WARNING, message, source=source)


class Command(ABC):
    """A built-in command.

    Subclasses set the class attributes and implement ``run()``.
    """

    name: ClassVar[str]
    usage: ClassVar[str]
    summary: ClassVar[str]
    min_args: ClassVar[int] = 0
    missing_args_message: ClassVar[str] = ""

    def execute(self, tokens: Sequence[str], ctx: CommandContext) -> Outcome:
        """Validate the argument count, then run the command.

        Args:
            tokens: The full token sequence; ``tokens[0]`` is the name.
            ctx: Output stream and logger.

        Returns:
            The outcome of the command.

        """
        args = list(tokens[1:])
        if len(args) < self.min_args:
            ctx.write(self.missing_args_message or f"Usage: {self.usage}")
            return Outcome.CONTINUE
        return self.run(args, ctx)

    @abstractmethod
    def run(self, args: list[str], ctx: CommandContext) -> Outcome:
        """Carry out the command with validated arguments."""


class CopyCommand(Command):
    """Copy a file byte for byte."""

    name = "cp"
    usage = "cp <source> <destination>"
    summary = "copy a file"
    min_args = 2
    missing_args_message = "Please input a source and destination, ie. cp source destination"

    def run(self, args: list[str], ctx: CommandContext) -> Outcome:
        """Copy ``args[0]`` to ``args[1]``.

        The source is opened first, so a missing source never creates
        or truncates the destination.  Copying a file onto itself is
        refused, since opening the destination would empty the source.

        Raises:
            FatalError: If either file cannot be opened.

        """
        source, destination = args[0], args[1]
        ctx.write(f"Copying {source} to {destination}..")
        if _same_file(source, destination):
            ctx.report(f"{source} and {destination} are the same file", source=self.name)
            return Outcome.CONTINUE
        try:
            with open(source, "rb") as src, open(destination, "wb") as dst:
                shutil.copyfileobj(src, dst)
        except OSError as e:
            msg = f"cannot copy {source} to {destination}: {e.strerror or e}"
            raise FatalError(msg, source=self.name) from e
        ctx.write("...Successful")
        return Outcome.CONTINUE


def _same_file(source: str, destination: str) -> bool:
    """Return True if both paths exist and name the same file."""
    try:
        return os.path.samefile(source, destination)
    except OSError:
        return False


class ListCommand(Command):
    """List the working directory."""

    name = "ls"
    usage = "ls"
    summary = "list the current directory"

    def run(self, _args: list[str], ctx: CommandContext) -> Outcome:
        """Print each entry of the working directory, sorted."""
        ctx.write("Listing contents of the directory...")
        try:
            with os.scandir(os.getcwd()) as it:
                names = sorted(entry.name for entry in it)
        except OSError as e:
            ctx.report(f"cannot list directory: {e.strerror or e}", source=self.name)
            return Outcome.CONTINUE
        for entry_name in names:
            ctx.write(f"\t{entry_name}")
        return Outcome.CONTINUE


class KillCommand(Command):
    """Forcibly terminate a process by PID."""

    name = "kill"
    usage = "kill <pid>"
    summary = "forcibly terminate a process"
    min_args = 1
    missing_args_message = "Please enter a valid Process ID"

    def run(self, args: list[str], ctx: CommandContext) -> Outcome:
        """Probe the process with signal 0, then send ``SIGKILL``."""
        ctx.write("Executing kill command...")
        try:
            pid = int(args[0])
        except ValueError:
            ctx.report(f"invalid PID '{args[0]}'", source=self.name)
            return Outcome.CONTINUE

        # 0 and negative values address process groups, not a process.
        if pid <= 0:
            ctx.report(f"invalid PID '{args[0]}'", source=self.name)
            return Outcome.CONTINUE

        try:
            os.kill(pid, _LIVENESS_PROBE)
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            ctx.report(f"PID {pid} does not exist", source=self.name)
        except PermissionError:
            ctx.report(f"permission denied for PID {pid}", source=self.name)
        except OverflowError:
            ctx.report(f"invalid PID '{args[0]}'", source=self.name)
        except OSError as e:
            ctx.report(f"cannot signal PID {pid}: {e.strerror or e}", source=self.name)
        else:
            ctx.write(f"Process {pid} killed.")
        return Outcome.CONTINUE


class ChangeDirectoryCommand(Command):
    """Change the working directory."""

    name = "cd"
    usage = "cd <directory>"
    summary = "change the working directory"
    min_args = 1
    missing_args_message = "Please enter a directory, ie. cd directory"

    def run(self, args: list[str], ctx: CommandContext) -> Outcome:
        """Change to ``args[0]``; the directory is unchanged on failure."""
        target = args[0]
        try:
            os.chdir(target)
        except OSError as e:
            ctx.report(
                f"cannot change directory to {target}: {e.strerror or e}", source=self.name
            )
            return Outcome.CONTINUE
        ctx.write(f"Currently in: {os.getcwd()}")
        return Outcome.CONTINUE


class HelpCommand(Command):
    """Print usage for every built-in."""

    name = "help"
    usage = "help"
    summary = "show this help"

    def run(self, _args: list[str], ctx: CommandContext) -> Outcome:
        """Print the static help text."""
        ctx.write(HELP_TEXT)
        return Outcome.CONTINUE


class EndCommand(Command):
    """Leave the interpreter."""

    name = "end"
    usage = "end"
    summary = "exit the terminal"

    def run(self, _args: list[str], _ctx: CommandContext) -> Outcome:
        """Signal the loop to stop."""
        return Outcome.TERMINATE


Registry: TypeAlias = tuple[tuple[str, Command], ...]


def build_registry(*commands: Command) -> Registry:
    """Pair each command with its own name, preserving order."""
    return tuple((command.name, command) for command in commands)


REGISTRY: Registry = build_registry(
    CopyCommand(),
    ListCommand(),
    KillCommand(),
    ChangeDirectoryCommand(),
    HelpCommand(),
    EndCommand(),
)
"""The built-in commands, in lookup order."""


def _format_help(registry: Registry) -> str:
    width = max(len(command.usage) for _name, command in registry)
    lines = ["Available commands:"]
    lines.extend(f"  {command.usage:<{width}}  {command.summary}" for _name, command in registry)
    return "\n".join(lines)


HELP_TEXT = _format_help(REGISTRY)
