"""Bounded, sequential content fetching with per-file failure isolation."""

import logging
from collections.abc import Callable, Iterable

from repodock.exceptions import FetchError
from repodock.models.analysis import FileEntry
from repodock.settings import get_settings
from repodock.sources.base import ContentSource

logger = logging.getLogger(__name__)

MANIFEST_NAMES = frozenset(
    {
        "package.json",
        "requirements.txt",
        "pom.xml",
        "Cargo.toml",
        "go.mod",
        "composer.json",
        ".gitignore",
    }
)

SOURCE_SUFFIXES = (".js", ".jsx", ".ts", ".tsx", ".py", ".json")


def is_manifest(entry: FileEntry) -> bool:
    name = entry.name
    lower = name.lower()
    return (
        name in MANIFEST_NAMES
        or name.endswith((".csproj", ".sln"))
        or "readme" in lower
        or "dockerfile" in lower
        or "docker-compose" in name
    )


def is_source_file(entry: FileEntry) -> bool:
    return entry.name.endswith(SOURCE_SUFFIXES)


async def _fetch(
    source: ContentSource,
    files: Iterable[FileEntry],
    wanted: Callable[[FileEntry], bool],
    limit: int,
    skip: frozenset[str] = frozenset(),
) -> dict[str, str]:
    candidates = [f for f in files if f.kind == "file" and f.path not in skip and wanted(f)]
    # Root-level files first so nested copies never crowd out the real ones.
    candidates.sort(key=lambda f: "/" in f.path)

    contents: dict[str, str] = {}
    for entry in candidates[:limit]:
        try:
            raw = await source.get_content(entry.path)
        except FetchError as e:
            logger.warning("Skipping %s: %s", entry.path, e)
            continue
        contents[entry.path] = raw.decode("utf-8", errors="replace")
    return contents


async def fetch_manifests(
    source: ContentSource,
    files: Iterable[FileEntry],
    limit: int | None = None,
) -> dict[str, str]:
    """Fetch manifest and configuration files.

    Args:
        source: Content source to read from.
        files: Repository listing.
        limit: Maximum number of files to fetch. Defaults to settings.

    Returns:
        Decoded contents keyed by path. Files that failed to fetch are absent.
    """
    if limit is None:
        limit = get_settings().manifest_fetch_limit
    contents = await _fetch(source, files, is_manifest, limit)
    logger.info("Fetched %d manifest files", len(contents))
    return contents


async def fetch_sources(
    source: ContentSource,
    files: Iterable[FileEntry],
    limit: int | None = None,
    skip: Iterable[str] = (),
) -> dict[str, str]:
    """Fetch source files for static analysis, skipping paths already fetched."""
    if limit is None:
        limit = get_settings().source_fetch_limit
    contents = await _fetch(source, files, is_source_file, limit, frozenset(skip))
    logger.info("Fetched %d source files", len(contents))
    return contents
