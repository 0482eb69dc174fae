"""The shell — command dispatcher.

The shell takes a token sequence, looks the first token up in the
registry, and hands the whole sequence to the matching command.

Design choices:
    - **First match in registry order.**  Names are compared with
      exact, case-sensitive equality, so ``CP`` and ``c`` never
      resolve to ``cp``.  The same name always resolves to the same
      command because the registry never changes after import.
    - **Writes to a stream, not to ``sys.stdout`` directly.**  The
      stream is a constructor argument, which keeps the shell
      testable with ``io.StringIO``.
    - **Fatal errors pass straight through.**  A ``FatalError`` from a
      command is the command's way of ending the process; only the
      entry point decides what to do with it.
"""

import sys
from collections.abc import Sequence
from typing import TextIO

from termemu.commands import REGISTRY, Command, CommandContext, Outcome, Registry
from termemu.logging import Logger, LogLevel
from termemu.tokenizer import first_token, tokenize

NO_COMMAND_MESSAGE = "!A command was not entered!"
UNRECOGNIZED_MESSAGE = "Sorry, that command is unrecognized"


class Shell:
    """Dispatch token sequences to built-in commands."""

    def __init__(
        self,
        registry: Registry = REGISTRY,
        *,
        stdout: TextIO | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a shell over a command registry.

        Args:
            registry: Ordered ``(name, command)`` pairs.
            stdout: Where command output goes (defaults to ``sys.stdout``).
            logger: Audit log to record dispatches in.

        """
        self._registry = registry
        self._logger = logger if logger is not None else Logger()
        self._ctx = CommandContext(
            stdout=stdout if stdout is not None else sys.stdout,
            logger=self._logger,
        )

    @property
    def logger(self) -> Logger:
        """Return the shell's audit log."""
        return self._logger

    @property
    def command_names(self) -> list[str]:
        """Return the registered command names in lookup order."""
        return [name for name, _command in self._registry]

    def lookup(self, name: str) -> Command | None:
        """Return the first command registered under *name*."""
        for registered, command in self._registry:
            if registered == name:
                return command
        return None

    def dispatch(self, tokens: Sequence[str]) -> Outcome:
        """Run the command named by ``tokens[0]``.

        Args:
            tokens: The command name followed by its arguments.  An
                empty sequence means nothing was entered.

        Returns:
            The command's outcome, or ``CONTINUE`` when there was no
            command or it was not recognized.

        Raises:
            FatalError: Propagated unchanged from the command.

        """
        name = first_token(tokens)
        if name is None:
            self._ctx.write(NO_COMMAND_MESSAGE)
            self._logger.log(LogLevel.INFO, "no command entered", source="shell")
            return Outcome.CONTINUE

        command = self.lookup(name)
        if command is None:
            self._ctx.write(UNRECOGNIZED_MESSAGE)
            self._logger.log(LogLevel.WARNING, f"unrecognized command: {name}", source="shell")
            return Outcome.CONTINUE

        self._logger.log(LogLevel.INFO, " ".join(tokens), source="shell")
        return command.execute(tokens, self._ctx)

    def execute(self, line: str) -> Outcome:
        """Tokenize a raw line and dispatch it."""
        return self.dispatch(tokenize(line))
