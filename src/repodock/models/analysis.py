"""Pydantic models for stack analysis."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

DependencyType = Literal["runtime", "dev", "peer"]


class FileEntry(BaseModel):
    """A path from the repository listing."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: Literal["file", "dir"] = "file"

    @property
    def name(self) -> str:
        """Last path segment."""
        return self.path.rsplit("/", 1)[-1]


class Dependency(BaseModel):
    """A dependency discovered in a manifest."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None
    type: DependencyType = "runtime"
    category: str = "library"


class StackAnalysis(BaseModel):
    """Inferred technology stack of a repository."""

    model_config = ConfigDict(frozen=True)

    primary_language: str = "unknown"
    framework: str | None = None
    package_manager: str | None = None
    runtime: str | None = None
    database: tuple[str, ...] = ()
    dependencies: tuple[Dependency, ...] = ()
    dev_dependencies: tuple[Dependency, ...] = ()
    scripts: dict[str, str] = {}
    build_tool: str | None = None
    test_framework: str | None = None
    linting: tuple[str, ...] = ()
    styling: tuple[str, ...] = ()

    @property
    def is_node(self) -> bool:
        return self.primary_language in ("javascript", "typescript")
