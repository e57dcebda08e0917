import os
import tempfile
import contextlib
from pathlib import Path

from .conf import FILE_MODE


def atomic_write(path: Path, data: bytes, mode: int = FILE_MODE) -> None:
    """Replace ``path`` with ``data`` without ever exposing a partial file.

    The bytes are written to a temporary file in the same directory,
    flushed to disk and renamed over the target, so readers observe
    either the old content or the new one. The directory is flushed
    after the rename.

    Args:
        path: Destination file. Missing parent directories are created.
        data: Full new content.
        mode: Permission bits applied before the rename.

    Raises:
        OSError: If the directory, the temporary file or the rename fails.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_path)
        raise
    _fsync_directory(path.parent)


def _fsync_directory(directory: Path) -> None:
    """Flush a directory entry so a completed rename survives a crash."""
    if os.name != "posix":
        return
    dir_fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(dir_fd)
    finally:
        os.close(dir_fd)
