"""Tests for running the compiler process."""

import subprocess
from pathlib import Path
from typing import Callable
from unittest.mock import patch

from boltpm.outcomes import CompilerFailure, LaunchFailure, Success
from boltpm.runner import run
from boltpm.tests.conftest import read_recorded_args, requires_posix_shell


@requires_posix_shell
def test_run_success(make_compiler: Callable[..., str]) -> None:
    compiler = make_compiler(exit_code=0)

    result = run(compiler, ["main.bolt", "-o", "app", "-lfmt"])

    assert isinstance(result, Success)
    assert result.exit_code == 0
    assert read_recorded_args(compiler) == ["main.bolt", "-o", "app", "-lfmt"]


@requires_posix_shell
def test_run_nonzero_exit(make_compiler: Callable[..., str]) -> None:
    compiler = make_compiler(exit_code=3)

    result = run(compiler, ["main.bolt"])

    assert result == CompilerFailure(compiler, 3)
    assert result.exit_code != 0


def test_run_missing_executable(tmp_path: Path) -> None:
    missing = str(tmp_path / "no-such-compiler")

    result = run(missing, ["main.bolt"])

    assert isinstance(result, LaunchFailure)
    assert result.executable == missing
    assert "PATH" in result.describe()


@requires_posix_shell
def test_run_non_executable_file(tmp_path: Path) -> None:
    script = tmp_path / "bolt-compiler"
    script.write_text("#!/bin/sh\nexit 0\n")
    script.chmod(0o644)

    result = run(str(script), [])

    assert isinstance(result, LaunchFailure)


def test_run_passes_argument_vector_without_shell() -> None:
    """Test that arguments are handed over as a list, never through a shell."""
    with patch(
        "boltpm.runner.subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0),
    ) as mock_run:
        result = run("bolt-compiler", ["main.bolt", "-o", "app; rm -rf ~"])

    assert isinstance(result, Success)
    mock_run.assert_called_once_with(
        ["bolt-compiler", "main.bolt", "-o", "app; rm -rf ~"], check=False
    )


def test_run_killed_by_signal_is_compiler_failure() -> None:
    with patch(
        "boltpm.runner.subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=-9),
    ):
        result = run("bolt-compiler", [])

    assert result == CompilerFailure("bolt-compiler", -9)
