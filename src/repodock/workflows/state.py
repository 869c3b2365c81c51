"""State for the scan pipeline workflow."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from repodock.agents.enrichment import EnrichmentClient
from repodock.models.analysis import FileEntry, StackAnalysis
from repodock.models.generation import GeneratedFiles
from repodock.models.testing import CodeFix, TestSuite
from repodock.models.validation import ValidationResult
from repodock.sources.base import ContentSource


class Severity(StrEnum):
    """Severity levels for progress messages."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# Callback signatures
ProgressCallback = Callable[[Severity, str], None]


def _noop_progress(severity: Severity, message: str) -> None:
    """Default no-op progress callback."""


@dataclass
class PipelineState:
    """Shared state for the scan pipeline."""

    source: ContentSource
    fix: bool = False
    enrichment: EnrichmentClient | None = None

    # Callback for UI interaction (CLI provides a Rich-based implementation)
    on_progress: ProgressCallback = _noop_progress

    # Set by FetchManifests
    files: list[FileEntry] = field(default_factory=list)
    manifests: dict[str, str] = field(default_factory=dict)
    snapshot: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # Set by the analysis, generation and validation nodes
    analysis: StackAnalysis | None = None
    generated: GeneratedFiles | None = None
    validation: ValidationResult | None = None

    # Static analysis results; replaced on the re-run after fixes
    suites: list[TestSuite] = field(default_factory=list)
    fixes: list[CodeFix] = field(default_factory=list)
    fixes_applied: bool = False
