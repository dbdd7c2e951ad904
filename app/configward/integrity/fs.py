"""Filesystem capability used by the recovery engine.

The engine only needs a handful of operations. Passing them in as an
object keeps the engine testable against fakes that fail on demand.
"""

import os
import shutil
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Protocol


class ConfigFileSystem(Protocol):
    """Operations the recovery engine and config writer perform on disk."""

    def exists(self, path: Path) -> bool:
        """Return True if a file exists at path."""
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Return the full contents of path."""
        ...

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Replace path with data atomically."""
        ...

    def copy_file(self, source: Path, dest: Path) -> None:
        """Copy source over dest, contents only."""
        ...

    def rename(self, source: Path, dest: Path) -> None:
        """Move source to dest, replacing dest if present."""
        ...

    def remove(self, path: Path) -> None:
        """Delete the file at path if it exists."""
        ...


class LocalFileSystem:
    """ConfigFileSystem backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, data: bytes) -> None:
        tmp_path: Path | None = None
        try:
            # Write atomically using a temporary file in the same directory
            with NamedTemporaryFile(dir=path.parent, delete=False, suffix=".tmp") as f:
                tmp_path = Path(f.name)
                f.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise

    def copy_file(self, source: Path, dest: Path) -> None:
        shutil.copyfile(source, dest)

    def rename(self, source: Path, dest: Path) -> None:
        os.replace(source, dest)

    def remove(self, path: Path) -> None:
        path.unlink(missing_ok=True)


def read_text(fs: ConfigFileSystem, path: Path) -> str:
    """Read a file through the capability and decode it as UTF-8.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    return fs.read_bytes(path).decode("utf-8")
