"""Repository content source protocol."""

from typing import Protocol, runtime_checkable

from repodock.models.analysis import FileEntry


@runtime_checkable
class ContentSource(Protocol):
    """Read access to one repository snapshot.

    list_files raises ListingError when the repository cannot be listed.
    get_content raises a FetchError subclass (NotFoundError, AccessDeniedError,
    RateLimitedError) for a file that cannot be read.
    """

    async def list_files(self) -> list[FileEntry]: ...

    async def get_content(self, path: str) -> bytes: ...
