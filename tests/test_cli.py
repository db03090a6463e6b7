"""Tests for the saferenv command line.

``main`` is driven with explicit argv against a known process
environment (see the ``clean_environ`` fixture).
"""
from __future__ import annotations

import importlib
import os
import runpy
import sys
from collections.abc import Callable, Mapping, Sequence

import pytest

from saferenv import __version__
from saferenv.cli import main, parse_args, run
from saferenv.core.errors import CommandEncodingError, CommandNotFound, InvalidVerbosity

REDACTED = "[REDACTED]"


class Executed(Exception):
    def __init__(self, args: Sequence[str], env: Mapping[str, str]) -> None:
        super().__init__(args[0])
        self.argv = list(args)
        self.env = dict(env)


@pytest.fixture
def fake_exec(monkeypatch: pytest.MonkeyPatch) -> None:
    def _execvpe(file: str, args: Sequence[str], env: Mapping[str, str]) -> None:
        raise Executed(args, env)

    monkeypatch.setattr(os, "execvpe", _execvpe)


def _printed(
    capsys: pytest.CaptureFixture[str],
    environ_without_pytest: Callable[..., dict[str, str]],
) -> dict[str, str]:
    out, _ = capsys.readouterr()
    return environ_without_pytest(dict(line.split("=", 1) for line in out.splitlines()))


# ===================================================================
# Argument parsing
# ===================================================================


class TestParseArgs:
    """Options and the trailing command."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.ignore_environment is False
        assert args.keep is None
        assert args.unset is None
        assert args.redact_value == REDACTED
        assert args.verbosity == 0
        assert args.command is None

    def test_repeated_options(self) -> None:
        args = parse_args(["-k", "A", "--keep", "B", "-u", "C", "--unset", "D"])
        assert args.keep == ["A", "B"]
        assert args.unset == ["C", "D"]

    def test_verbosity_count(self) -> None:
        assert parse_args(["-vvv"]).verbosity == 3
        assert parse_args(["--debug", "--debug"]).verbosity == 2

    def test_command_taken_verbatim(self) -> None:
        args = parse_args(["-i", "env", "-i", "--unset", "X"])
        assert args.ignore_environment is True
        assert args.unset is None
        assert args.command == ["env", "-i", "--unset", "X"]

    def test_double_dash_separator(self) -> None:
        args = parse_args(["-k", "A", "--", "ls", "-l"])
        assert args.command == ["ls", "-l"]

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ===================================================================
# Printing the environment
# ===================================================================


class TestPrintMode:
    """Without a command the filtered environment is printed."""

    def test_default_rules(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str],
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        assert main([]) == 0
        assert _printed(capsys, environ_without_pytest) == {
            "PATH": "/usr/bin:/bin",
            "HOME": "/home/tester",
            "GITHUB_TOKEN": REDACTED,
            "DB_PASSWORD": REDACTED,
        }

    def test_keep_unset_and_redact_value(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str],
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        assert main(["-k", "GITHUB_TOKEN", "-u", "HOME", "-r", "xxx"]) == 0
        assert _printed(capsys, environ_without_pytest) == {
            "PATH": "/usr/bin:/bin",
            "GITHUB_TOKEN": "ghp_example",
            "DB_PASSWORD": "xxx",
        }

    def test_ignore_environment(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str],
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        assert main(["-i", "-k", "PATH"]) == 0
        assert _printed(capsys, environ_without_pytest) == {"PATH": "/usr/bin:/bin"}

    def test_ignore_environment_prints_nothing(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["-i"]) == 0
        assert capsys.readouterr().out == ""

    def test_logs_go_to_stderr(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["-v"]) == 0
        out, err = capsys.readouterr()
        assert "GITHUB_TOKEN" in err
        assert "matched rule" in err
        assert "matched rule" not in out
        assert "ghp_example" not in err

    def test_non_utf8_lang_warns(
        self,
        clean_environ: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("LANG", "C")
        assert main([]) == 0
        assert "Non UTF-8 environment detected" in capsys.readouterr().err


# ===================================================================
# Running a command
# ===================================================================


class TestCommandMode:
    """With a command, exec receives the filtered environment."""

    def test_exec_receives_filtered_env(
        self, clean_environ: dict[str, str], fake_exec: None,
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        with pytest.raises(Executed) as exc_info:
            main(["-u", "DB_PASSWORD", "printenv", "GITHUB_TOKEN"])
        assert exc_info.value.argv == ["printenv", "GITHUB_TOKEN"]
        assert environ_without_pytest(exc_info.value.env) == {
            "PATH": "/usr/bin:/bin",
            "HOME": "/home/tester",
            "GITHUB_TOKEN": REDACTED,
        }

    def test_command_not_found(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["/nonexistent/saferenv-test-program"]) == 127
        err = capsys.readouterr().err
        assert "command not found" in err
        assert CommandNotFound.resolution in err

    def test_error_payload_logged_at_debug(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["-vv", "/nonexistent/saferenv-test-program"]) == 127
        err = capsys.readouterr().err
        assert "'code': 'SE-E401'" in err
        assert "'exit_code': 127" in err

    def test_nul_in_command_is_data_error(
        self, clean_environ: dict[str, str], fake_exec: None,
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        assert main(["-i", "echo", "a\x00b"]) == 65
        assert environ_without_pytest() == clean_environ

    def test_data_error_shows_resolution(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["echo", "a\x00b"]) == 65
        err = capsys.readouterr().err
        assert CommandEncodingError.resolution in err
        assert "SE-E300" not in err


# ===================================================================
# Usage errors
# ===================================================================


class TestUsageErrors:
    """Errors are reported before the environment is touched."""

    def test_too_verbose(
        self, clean_environ: dict[str, str], capsys: pytest.CaptureFixture[str],
        environ_without_pytest: Callable[..., dict[str, str]],
    ) -> None:
        assert main(["-vvvv", "-i"]) == 64
        err = capsys.readouterr().err
        assert "verbosity level cannot be greater than 3" in err
        assert InvalidVerbosity.resolution in err
        assert environ_without_pytest() == clean_environ

    def test_unknown_option(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--no-such-option"])
        assert exc_info.value.code == 2


# ===================================================================
# python -m saferenv
# ===================================================================


class TestModuleEntrypoint:
    """``python -m saferenv`` runs the CLI; a plain import does not."""

    def test_import_does_not_run(self) -> None:
        module = importlib.import_module("saferenv.__main__")
        assert module.run is run

    def test_run_as_main(
        self,
        clean_environ: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(sys, "argv", ["saferenv", "-i", "-k", "HOME"])
        monkeypatch.delitem(sys.modules, "saferenv.__main__", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("saferenv", run_name="__main__")
        assert exc_info.value.code == 0
        assert capsys.readouterr().out == "HOME=/home/tester\n"
