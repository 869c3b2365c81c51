"""Shared inputs and helpers for the static analysis suites."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from repodock.models.analysis import StackAnalysis
from repodock.models.generation import GeneratedFiles
from repodock.settings import Settings

# Read-only path -> content map of project files. Fixes produce a new one.
Snapshot = Mapping[str, str]

JS_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")


@dataclass(frozen=True)
class CheckContext:
    """Everything a suite may inspect."""

    analysis: StackAnalysis
    generated: GeneratedFiles
    snapshot: Snapshot
    settings: Settings

    @property
    def is_js_project(self) -> bool:
        return self.analysis.primary_language in ("javascript", "typescript")

    def files_with_suffix(self, *suffixes: str) -> Iterator[tuple[str, str]]:
        for path, content in self.snapshot.items():
            if path.endswith(suffixes):
                yield path, content


def numbered_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line) pairs."""
    for index, line in enumerate(content.split("\n")):
        yield index + 1, line
