"""File system access used by the configuration store."""

import os
import stat
import tempfile
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Port for the file operations the store needs."""

    def exists(self, path: Path) -> bool:
        """Return True if path exists."""
        ...

    def read_text(self, path: Path) -> str:
        """Read a whole file as UTF-8 text."""
        ...

    def write_text(self, path: Path, text: str) -> None:
        """Replace the contents of path; readers never see a partial write."""
        ...

    def create_dir_all(self, path: Path) -> None:
        """Create a directory and any missing parents."""
        ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            if path.exists():
                os.chmod(temp_path, stat.S_IMODE(path.stat().st_mode))
            os.replace(temp_path, path)
        finally:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def create_dir_all(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
