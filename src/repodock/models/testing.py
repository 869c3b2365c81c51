"""Pydantic models for static analysis suites and fixes."""

from typing import Literal

from pydantic import BaseModel, computed_field

SuiteType = Literal["syntax", "lint", "build", "integration", "unit"]
SuiteStatus = Literal["pending", "running", "passed", "failed", "skipped"]


class Finding(BaseModel):
    """Fields shared by errors and warnings."""

    id: str
    file: str
    line: int | None = None
    column: int | None = None
    message: str
    rule: str | None = None
    fixable: bool = False
    suggested_fix: str | None = None


class TestError(Finding):
    """A finding that fails its suite."""

    __test__ = False

    severity: Literal["error", "warning", "info"] = "error"


class TestWarning(Finding):
    """A finding reported without failing its suite."""

    __test__ = False


class TestSuite(BaseModel):
    """Results of one static analysis suite."""

    __test__ = False

    id: str
    name: str
    type: SuiteType
    errors: list[TestError] = []
    warnings: list[TestWarning] = []
    suggestions: list[str] = []

    @computed_field
    @property
    def status(self) -> SuiteStatus:
        """Failed iff the suite produced at least one error."""
        return "failed" if self.errors else "passed"


class CodeFix(BaseModel):
    """Full-content before/after of one automatic fix."""

    file: str
    original: str
    fixed: str
    description: str
