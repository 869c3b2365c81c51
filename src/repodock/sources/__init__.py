"""Repository content sources."""

from repodock.sources.base import ContentSource
from repodock.sources.fetch import fetch_manifests, fetch_sources
from repodock.sources.local import LocalDirectorySource

__all__ = ["ContentSource", "LocalDirectorySource", "fetch_manifests", "fetch_sources"]
