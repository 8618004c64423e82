import os
from pathlib import Path
from unittest.mock import patch

import pytest

from boltpm.storage import create_text_exclusive, write_text_atomic


def test_write_text_atomic_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "bolt.toml"

    assert write_text_atomic(path, "[package]\n") == path

    assert path.read_text() == "[package]\n"
    assert path.stat().st_mode & 0o777 == 0o644


def test_write_text_atomic_keeps_mode(tmp_path: Path) -> None:
    path = tmp_path / "bolt.toml"
    path.write_text("old\n")
    path.chmod(0o600)

    write_text_atomic(path, "new\n")

    assert path.read_text() == "new\n"
    assert path.stat().st_mode & 0o777 == 0o600


def test_write_text_atomic_failure_keeps_original(tmp_path: Path) -> None:
    """Test that a failed replace leaves the old file and no temporary file."""
    path = tmp_path / "bolt.toml"
    path.write_text("old\n")

    with patch("boltpm.storage.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            write_text_atomic(path, "new\n")

    assert path.read_text() == "old\n"
    assert os.listdir(tmp_path) == ["bolt.toml"]


def test_create_text_exclusive(tmp_path: Path) -> None:
    path = tmp_path / "main.bolt"

    assert create_text_exclusive(path, "first\n")
    assert not create_text_exclusive(path, "second\n")
    assert path.read_text() == "first\n"


def test_write_text_atomic_follows_symlink(tmp_path: Path) -> None:
    real = tmp_path / "shared" / "bolt.toml"
    real.parent.mkdir()
    real.write_text("old\n")
    link = tmp_path / "bolt.toml"
    link.symlink_to(real)

    write_text_atomic(link, "new\n")

    assert link.is_symlink()
    assert real.read_text() == "new\n"
    assert os.listdir(tmp_path / "shared") == ["bolt.toml"]
