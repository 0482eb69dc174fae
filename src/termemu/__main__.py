"""Allow ``python -m termemu``."""

from termemu.repl import run

run()
