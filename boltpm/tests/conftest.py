"""Shared test fixtures and utilities."""

import os
import stat
from pathlib import Path
from typing import Callable, Generator

import pytest

from boltpm.config import ENV_OVERRIDES, BoltConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep the developer's BOLT_* settings out of the tests."""
    for name in [*ENV_OVERRIDES, "BOLT_CONFIG_PATH"]:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory that is also the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def config() -> BoltConfig:
    return BoltConfig()


@pytest.fixture
def make_compiler(tmp_path: Path) -> Callable[..., str]:
    """Factory for stub compilers.

    Each stub records its arguments, one per line, in ``<stub>.args`` next to
    itself and exits with the requested status.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def factory(exit_code: int = 0, name: str = "bolt-compiler") -> str:
        path = bin_dir / name
        path.write_text(
            "#!/bin/sh\n"
            f'printf \'%s\\n\' "$@" > "{path}.args"\n'
            f"exit {exit_code}\n"
        )
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return factory


def read_recorded_args(compiler: str) -> list[str]:
    """Arguments the stub compiler was last called with."""
    return Path(f"{compiler}.args").read_text().splitlines()


requires_posix_shell = pytest.mark.skipif(
    os.name != "posix", reason="stub compilers are shell scripts"
)
