"""Pydantic models for repodock."""

from repodock.models.analysis import Dependency, FileEntry, StackAnalysis
from repodock.models.generation import (
    DockerConfig,
    EnrichedFiles,
    GeneratedFiles,
    HealthCheckConfig,
)
from repodock.models.testing import CodeFix, Finding, TestError, TestSuite, TestWarning
from repodock.models.validation import (
    DockerValidation,
    SecurityIssue,
    ValidationCheck,
    ValidationResult,
)

__all__ = [
    "CodeFix",
    "Dependency",
    "DockerConfig",
    "DockerValidation",
    "EnrichedFiles",
    "FileEntry",
    "Finding",
    "GeneratedFiles",
    "HealthCheckConfig",
    "SecurityIssue",
    "StackAnalysis",
    "TestError",
    "TestSuite",
    "TestWarning",
    "ValidationCheck",
    "ValidationResult",
]
