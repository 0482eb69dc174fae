"""Split a raw input line into tokens.

A token is a maximal run of characters that are not delimiters.  The
default delimiters are space, tab and newline, so a line read from
the terminal (trailing newline and all) splits the way you would
expect::

    >>> tokenize("cp  a.txt\tb.txt\n")
    ('cp', 'a.txt', 'b.txt')

A line with nothing but delimiters yields the empty tuple, which the
dispatcher treats as "no command entered".
"""

import re
from collections.abc import Sequence
from functools import cache
from typing import TypeAlias

DELIMITERS = " \t\n"

Tokens: TypeAlias = tuple[str, ...]


@cache
def _token_pattern(delimiters: str) -> re.Pattern[str]:
    """Compile the pattern matching one token for a delimiter set."""
    if not delimiters:
        msg = "at least one delimiter is required"
        raise ValueError(msg)
    return re.compile(f"[^{re.escape(delimiters)}]+")


def tokenize(line: str, delimiters: str = DELIMITERS) -> Tokens:
    """Return the tokens of *line* in left-to-right order.

    Args:
        line: One line of raw input.
        delimiters: Characters that separate tokens.

    Returns:
        A tuple with one element per token; never contains an empty
        string.

    Raises:
        ValueError: If *delimiters* is empty.

    """
    return tuple(_token_pattern(delimiters).findall(line))


def first_token(tokens: Sequence[str]) -> str | None:
    """Return the command name, or ``None`` if no command was entered."""
    return tokens[0] if tokens else None
