"""Exception hierarchy for repodock."""


class RepodockError(Exception):
    """Base exception for all repodock errors."""


class SourceError(RepodockError):
    """Repository content source failed."""


class ListingError(SourceError):
    """Failed to list repository files. Nothing can be analyzed without a listing."""


class FetchError(SourceError):
    """Failed to fetch the content of a single file."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        super().__init__(f"Failed to fetch {path}" + (f": {reason}" if reason else ""))


class NotFoundError(FetchError):
    """File does not exist in the source."""


class AccessDeniedError(FetchError):
    """Source refused access to the file."""


class RateLimitedError(FetchError):
    """Source rate limit hit while fetching the file."""


class EnrichmentError(RepodockError):
    """Enrichment service unreachable, slow, or returned an unusable response."""


class PipelineError(RepodockError):
    """Pipeline workflow could not produce a result."""
