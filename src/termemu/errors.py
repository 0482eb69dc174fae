"""Exceptions that end the interpreter.

Most failures a command meets are reported to the user and the loop
carries on.  A ``FatalError`` is different: the command cannot go on
and neither can the process.  The shell never catches it; the entry
point turns it into an exit status.
"""

EXIT_FAILURE = 1


class FatalError(Exception):
    """Raised when a command hits an unrecoverable resource error.

    Attributes:
        source: The command that failed (used as the log source).
        status: The process exit status to report.

    """

    def __init__(self, message: str, *, source: str, status: int = EXIT_FAILURE) -> None:
        """Create a fatal error with a message, its source and exit status."""
        super().__init__(message)
        self.source = source
        self.status = status
