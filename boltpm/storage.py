import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_text_atomic(path: Path, text: str) -> Path:
    """Replace a file's contents without exposing a partially written file.

    The text is written to a temporary file in the same directory, flushed to
    disk and renamed over the target.

    Args:
        path: File to write
        text: New contents

    Returns:
        Path that was written

    Raises:
        OSError: If the file cannot be written
    """
    # Replace the file a symlink points to, not the link itself
    target = path.resolve()
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600 files; keep the target's mode instead
        mode = target.stat().st_mode & 0o777 if target.exists() else 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
        logger.debug(f"Successfully wrote {path}")
        return path
    except Exception:
        logger.exception(f"Failed to write {path}")
        Path(tmp_name).unlink(missing_ok=True)
        raise


def create_text_exclusive(path: Path, text: str) -> bool:
    """Create a text file only if it does not exist yet.

    Args:
        path: File to create
        text: Contents for the new file

    Returns:
        True if the file was created, False if it already existed
    """
    try:
        with path.open("x", encoding="utf-8", newline="") as f:
            f.write(text)
    except FileExistsError:
        logger.debug(f"{path} already exists, leaving it untouched")
        return False
    logger.info(f"Created {path}")
    return True
