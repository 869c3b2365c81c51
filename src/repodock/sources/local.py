"""Content source backed by a local directory."""

import logging
import os
from pathlib import Path

import aiofiles

from repodock.exceptions import AccessDeniedError, ListingError, NotFoundError
from repodock.models.analysis import FileEntry

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({".git", "node_modules"})


class LocalDirectorySource:
    """Serve a checked-out repository from disk."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    async def list_files(self) -> list[FileEntry]:
        if not self.root.is_dir():
            raise ListingError(f"Not a directory: {self.root}")

        entries: list[FileEntry] = []
        try:
            for dirpath, dirnames, filenames in os.walk(self.root, onerror=_raise):
                dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRS)
                rel_dir = Path(dirpath).relative_to(self.root)
                for name in dirnames:
                    entries.append(FileEntry(path=(rel_dir / name).as_posix(), kind="dir"))
                for name in sorted(filenames):
                    entries.append(FileEntry(path=(rel_dir / name).as_posix(), kind="file"))
        except OSError as e:
            raise ListingError(f"Failed to list {self.root}: {e}") from e

        logger.debug("Listed %d entries under %s", len(entries), self.root)
        return entries

    def _resolve(self, path: str) -> Path:
        root = self.root.resolve()
        target = (root / path).resolve()
        if not target.is_relative_to(root):
            raise AccessDeniedError(path, "outside repository root")
        return target

    async def get_content(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise NotFoundError(path)
        try:
            async with aiofiles.open(target, "rb") as f:
                return await f.read()
        except PermissionError as e:
            raise AccessDeniedError(path, str(e)) from e
        except FileNotFoundError as e:
            raise NotFoundError(path) from e


def _raise(error: OSError) -> None:
    raise error
