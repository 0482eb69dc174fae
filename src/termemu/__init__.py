"""termemu — a minimal interactive command interpreter.

Reads a line, splits it into a command name and arguments, and
dispatches to a fixed set of built-ins: ``cp``, ``ls``, ``kill``,
``cd``, ``help`` and ``end``.  Run with arguments to execute a single
command without entering the interactive loop.
"""

__version__ = "0.1.0"
