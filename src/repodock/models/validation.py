"""Pydantic models for repository validation."""

from typing import Literal

from pydantic import BaseModel

CheckStatus = Literal["pass", "fail", "warning", "info"]
CheckCategory = Literal["structure", "dependencies", "configuration", "security", "performance"]
CheckSeverity = Literal["low", "medium", "high", "critical"]


class ValidationCheck(BaseModel):
    """Outcome of a single repository check."""

    name: str
    status: CheckStatus
    category: CheckCategory
    severity: CheckSeverity
    message: str
    details: str | None = None


class SecurityIssue(BaseModel):
    """A container security concern."""

    type: Literal["vulnerability", "misconfiguration", "best-practice"]
    severity: CheckSeverity
    description: str
    fix: str


class DockerValidation(BaseModel):
    """Heuristic estimates and advice for the container image."""

    dockerfile_valid: bool = True
    buildable: bool = True
    estimated_size: str
    build_time: str
    security_issues: list[SecurityIssue] = []
    optimizations: list[str] = []


class ValidationResult(BaseModel):
    """Weighted health score of a repository."""

    is_valid: bool
    score: int  # 0-100
    checks: list[ValidationCheck] = []
    recommendations: list[str] = []
    docker_validation: DockerValidation | None = None
