"""Tests for the interactive loop and batch entry point.

The loop helpers take their line reader as an argument, so scripted
input drives them directly.  ``main()`` is exercised end to end with
``sys.stdin`` replaced and output captured by ``capsys``.
"""

import io
import os
import sys
from collections.abc import Iterable
from pathlib import Path

import pytest

from termemu.commands import EndCommand, ListCommand, Outcome, build_registry
from termemu.repl import (
    EXIT_INTERRUPTED,
    PROMPT,
    format_banner,
    main,
    run_batch,
    run_interactive,
)
from termemu.shell import Shell


class _ScriptedInput:
    """Line reader that replays lines, then signals end of input."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        try:
            return next(self._lines)
        except StopIteration:
            raise EOFError from None


def _shell() -> tuple[Shell, io.StringIO]:
    out = io.StringIO()
    return Shell(stdout=out), out


class TestBanner:
    """Verify the startup banner."""

    def test_banner_contents(self) -> None:
        """The banner names the commands and the starting directory."""
        banner = format_banner("/home/user", ["cp", "ls", "end"])
        assert "Terminal Successfully Started!" in banner
        assert "Try Commands: cp, ls, end" in banner
        assert "Currently in: /home/user" in banner


class TestRunBatch:
    """Verify single-dispatch batch mode."""

    def test_end_exits_zero(self) -> None:
        """Batch end succeeds."""
        shell, _out = _shell()
        assert run_batch(shell, ["end"]) == 0

    def test_continue_exits_zero(self) -> None:
        """A command that continues is still a successful batch run."""
        shell, out = _shell()
        assert run_batch(shell, ["help"]) == 0
        assert "Available commands" in out.getvalue()

    def test_unrecognized_exits_zero(self) -> None:
        """An unknown batch command is reported, not a failure."""
        shell, out = _shell()
        assert run_batch(shell, ["foobar"]) == 0
        assert "unrecognized" in out.getvalue()


class TestRunInteractive:
    """Verify the read-dispatch loop."""

    def test_stops_on_end(self) -> None:
        """The loop stops at end and reads nothing after it."""
        shell, _out = _shell()
        reader = _ScriptedInput(["help\n", "end\n", "help\n"])
        assert run_interactive(shell, read_line=reader) == 0
        assert len(reader.prompts) == 2

    def test_prompt_text(self) -> None:
        """Each read is preceded by the :> prompt."""
        shell, _out = _shell()
        reader = _ScriptedInput(["end"])
        run_interactive(shell, read_line=reader)
        assert reader.prompts == [PROMPT]
        assert PROMPT == ":> "

    def test_empty_lines_continue(self) -> None:
        """Blank lines keep the loop going."""
        shell, out = _shell()
        reader = _ScriptedInput(["\n", "   \n", "end\n"])
        assert run_interactive(shell, read_line=reader) == 0
        assert out.getvalue().count("!A command was not entered!") == 2

    def test_unrecognized_continues(self) -> None:
        """An unknown command does not stop the loop."""
        shell, out = _shell()
        reader = _ScriptedInput(["foobar\n", "end\n"])
        assert run_interactive(shell, read_line=reader) == 0
        assert "Sorry, that command is unrecognized" in out.getvalue()
        assert len(reader.prompts) == 2

    def test_end_of_input_terminates(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Running out of input ends the loop successfully."""
        shell, _out = _shell()
        assert run_interactive(shell, read_line=_ScriptedInput(["help\n"])) == 0
        assert capsys.readouterr().out == "\n"
        assert shell.logger.entries[-1].message == "end of input"

    def test_custom_registry(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The loop dispatches against whatever registry the shell holds."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "x").touch()
        out = io.StringIO()
        shell = Shell(build_registry(ListCommand(), EndCommand()), stdout=out)
        run_interactive(shell, read_line=_ScriptedInput(["ls", "cp a b", "end"]))
        assert "\tx" in out.getvalue()
        assert "unrecognized" in out.getvalue()
        assert shell.dispatch(("end",)) is Outcome.TERMINATE


class TestMain:
    """Verify the process entry point."""

    def test_batch_end(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Batch end exits 0 without prompting."""
        assert main(["termemu", "end"]) == 0
        out = capsys.readouterr().out
        assert PROMPT not in out
        assert "Terminal Successfully Started!" not in out

    def test_batch_cp(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A batch cp copies the file and exits 0."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "a.txt").write_text("hello")
        assert main(["termemu", "cp", "a.txt", "b.txt"]) == 0
        assert (tmp_path / "b.txt").read_text() == "hello"

    def test_batch_fatal(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A cp that cannot open its source exits 1 and reports on stderr."""
        monkeypatch.chdir(tmp_path)
        assert main(["termemu", "cp", "missing.txt", "out.txt"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("[ERROR] cp: cannot copy missing.txt")

    def test_interactive_session(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Interactive mode shows the banner, prompts, and stops at end."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "a.txt").write_text("hello")
        monkeypatch.setattr(sys, "stdin", io.StringIO("cp a.txt b.txt\nls\nend\nls\n"))
        assert main(["termemu"]) == 0
        out = capsys.readouterr().out
        assert "Terminal Successfully Started!" in out
        assert f"Currently in: {Path.cwd()}" in out
        assert out.count(PROMPT) == 3
        assert "\tb.txt" in out
        assert (tmp_path / "b.txt").read_text() == "hello"

    def test_interactive_end_of_input(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Closing stdin ends an interactive session with status 0."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("help\n"))
        assert main(["termemu"]) == 0
        assert "Available commands" in capsys.readouterr().out

    def test_interactive_fatal(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A fatal cp in the loop ends the session with status 1."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "stdin", io.StringIO("cp nope out\nend\n"))
        assert main(["termemu"]) == 1
        assert "[ERROR]" in capsys.readouterr().err

    def test_interrupt(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Ctrl+C ends the session with status 130."""

        class _Interrupting(io.StringIO):
            def readline(self, _size: int | None = -1) -> str:
                raise KeyboardInterrupt

        monkeypatch.setattr(sys, "stdin", _Interrupting())
        assert main(["termemu"]) == EXIT_INTERRUPTED
        assert "Interrupted." in capsys.readouterr().out

    def test_unknown_working_directory(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Startup fails with status 1 when the cwd cannot be determined."""

        def _gone() -> str:
            raise FileNotFoundError(2, "No such file or directory")

        monkeypatch.setattr(os, "getcwd", _gone)
        status = main(["termemu"])
        monkeypatch.undo()
        assert status == 1
        captured = capsys.readouterr()
        assert "Error Status 2" in captured.err
        assert "No such file or directory" in captured.err
        assert PROMPT not in captured.out

