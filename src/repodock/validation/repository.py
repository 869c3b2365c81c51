"""Weighted repository health validation."""

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from fnmatch import fnmatch

from repodock.models.analysis import FileEntry, StackAnalysis
from repodock.models.validation import (
    CheckCategory,
    CheckSeverity,
    CheckStatus,
    DockerValidation,
    SecurityIssue,
    ValidationCheck,
    ValidationResult,
)
from repodock.settings import get_settings

logger = logging.getLogger(__name__)

SEVERITY_WEIGHTS: dict[CheckSeverity, int] = {"critical": 10, "high": 7, "medium": 5, "low": 2}

CATEGORY_WEIGHTS: dict[CheckCategory, float] = {
    "security": 1.5,
    "structure": 1.2,
    "dependencies": 1.3,
    "configuration": 1.0,
    "performance": 0.8,
}

STATUS_CREDIT: dict[CheckStatus, float] = {"pass": 1.0, "info": 0.9, "warning": 0.7, "fail": 0.0}

PASSING_SCORE = 70

SENSITIVE_FILES = (".env", ".env.local", "config.json", "secrets.json")

OPTIMIZING_BUILD_TOOLS = frozenset({"Webpack", "Vite", "Rollup"})

IMAGE_BASE_MB: dict[str, int] = {
    "javascript": 150,
    "typescript": 150,
    "python": 120,
    "java": 200,
    "go": 80,
    "rust": 90,
}

BUILD_BASE_SECONDS: dict[str, int] = {
    "javascript": 45,
    "typescript": 45,
    "java": 120,
    "rust": 180,
}


@dataclass(frozen=True)
class EssentialFile:
    path: str
    required: bool
    description: str


ESSENTIAL_FILES: dict[str, list[EssentialFile]] = {
    "javascript": [EssentialFile("package.json", True, "Node.js package configuration")],
    "typescript": [EssentialFile("package.json", True, "Node.js package configuration")],
    "python": [EssentialFile("requirements.txt", False, "Python dependencies")],
    "java": [EssentialFile("pom.xml", False, "Maven project configuration")],
}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _is_js(analysis: StackAnalysis) -> bool:
    return analysis.primary_language in ("javascript", "typescript")


def check_weight(check: ValidationCheck) -> float:
    return SEVERITY_WEIGHTS[check.severity] * CATEGORY_WEIGHTS[check.category]


def calculate_score(checks: Iterable[ValidationCheck]) -> int:
    """Weighted score in [0, 100]. No checks scores 0."""
    total_weight = 0.0
    weighted = 0.0
    for check in checks:
        weight = check_weight(check)
        total_weight += weight
        weighted += weight * STATUS_CREDIT[check.status]
    if total_weight <= 0:
        return 0
    return max(0, min(100, _round_half_up(100 * weighted / total_weight)))


# --- Structure ---


def _structure_checks(paths: list[str], analysis: StackAnalysis) -> list[ValidationCheck]:
    checks = []
    for essential in ESSENTIAL_FILES.get(analysis.primary_language, []):
        exists = essential.path in paths
        checks.append(
            ValidationCheck(
                name=f"Essential File: {essential.path}",
                status="pass" if exists else ("fail" if essential.required else "warning"),
                category="structure",
                severity="high" if essential.required else "medium",
                message=f"{essential.path} found" if exists else f"{essential.path} missing",
                details=essential.description,
            )
        )

    if _is_js(analysis):
        has_src = any(p.startswith("src/") for p in paths)
        checks.append(
            ValidationCheck(
                name="Source Directory",
                status="pass" if has_src else "info",
                category="structure",
                severity="low",
                message="src/ directory found" if has_src else "No src/ directory found",
                details="Organized source structure improves maintainability",
            )
        )

    has_tests = any("test" in p or "spec" in p or "__tests__" in p for p in paths)
    checks.append(
        ValidationCheck(
            name="Test Directory",
            status="pass" if has_tests else "warning",
            category="structure",
            severity="medium",
            message="Test directory found" if has_tests else "No test directory found",
            details="Organized test structure encourages testing",
        )
    )

    has_readme = any("readme" in p.lower() for p in paths)
    checks.append(
        ValidationCheck(
            name="Documentation",
            status="pass" if has_readme else "warning",
            category="structure",
            severity="medium",
            message="README file found" if has_readme else "No README file found",
            details="Documentation helps users understand and contribute to the project",
        )
    )
    return checks


# --- Dependencies ---


def _dependency_checks(
    analysis: StackAnalysis, contents: Mapping[str, str]
) -> list[ValidationCheck]:
    checks = [
        ValidationCheck(
            name="Dependency Freshness",
            status="info",
            category="dependencies",
            severity="low",
            message="Consider checking for outdated dependencies",
            details="Regular dependency updates improve security and performance",
        ),
        ValidationCheck(
            name="Security Vulnerabilities",
            status="info",
            category="dependencies",
            severity="medium",
            message="Run security audit to check for vulnerabilities",
            details="Use npm audit, pip-audit, or similar tools",
        ),
        ValidationCheck(
            name="Unused Dependencies",
            status="info",
            category="dependencies",
            severity="low",
            message="Consider analyzing for unused dependencies",
            details="Removing unused dependencies reduces bundle size",
        ),
    ]

    runtime_names = {d.name for d in analysis.dependencies}
    conflicts = sorted({d.name for d in analysis.dev_dependencies if d.name in runtime_names})
    if conflicts:
        checks.append(
            ValidationCheck(
                name="Dependency Conflicts",
                status="warning",
                category="dependencies",
                severity="low",
                message=f"Declared as both runtime and dev dependency: {', '.join(conflicts)}",
                details="Each package should be declared in exactly one dependency group",
            )
        )
    else:
        checks.append(
            ValidationCheck(
                name="Dependency Conflicts",
                status="pass",
                category="dependencies",
                severity="low",
                message="No obvious dependency conflicts detected",
            )
        )

    package_json = contents.get("package.json")
    if package_json is not None:
        try:
            parsed = json.loads(package_json)
        except ValueError as e:
            logger.debug("package.json does not parse: %s", e)
            parsed = None
        if not isinstance(parsed, dict):
            checks.append(
                ValidationCheck(
                    name="Package Manifest",
                    status="fail",
                    category="dependencies",
                    severity="high",
                    message="package.json is not valid JSON",
                    details="npm cannot install dependencies from a malformed manifest",
                )
            )
    return checks


# --- Configuration ---


def _configuration_checks(paths: list[str], analysis: StackAnalysis) -> list[ValidationCheck]:
    checks = []
    if analysis.build_tool:
        checks.append(
            ValidationCheck(
                name="Build Configuration",
                status="pass",
                category="configuration",
                severity="low",
                message=f"{analysis.build_tool} configuration detected",
            )
        )

    if analysis.test_framework:
        checks.append(
            ValidationCheck(
                name="Test Configuration",
                status="pass",
                category="configuration",
                severity="low",
                message=f"{analysis.test_framework} testing framework detected",
            )
        )
    else:
        checks.append(
            ValidationCheck(
                name="Test Configuration",
                status="warning",
                category="configuration",
                severity="medium",
                message="No testing framework detected",
                details="Consider adding a testing framework for better code quality",
            )
        )

    has_env_config = any(".env" in p or "config" in p for p in paths)
    checks.append(
        ValidationCheck(
            name="Environment Configuration",
            status="pass" if has_env_config else "info",
            category="configuration",
            severity="low",
            message="Environment configuration found"
            if has_env_config
            else "Consider adding environment configuration",
            details="Environment-specific configuration improves deployment flexibility",
        )
    )
    return checks


# --- Security ---


def ignores_env_file(gitignore: str) -> bool:
    """Whether any .gitignore pattern matches a root `.env` file."""
    for raw in gitignore.splitlines():
        pattern = raw.strip()
        if not pattern or pattern.startswith("#") or pattern.startswith("!"):
            continue
        if fnmatch(".env", pattern.lstrip("/")):
            return True
    return False


def _security_checks(
    paths: list[str], analysis: StackAnalysis, contents: Mapping[str, str]
) -> list[ValidationCheck]:
    checks = [
        ValidationCheck(
            name="Sensitive Files",
            status="warning",
            category="security",
            severity="high",
            message=f"Potentially sensitive file found: {sensitive}",
            details="Ensure sensitive files are not committed to version control",
        )
        for sensitive in SENSITIVE_FILES
        if any(sensitive in p for p in paths)
    ]

    has_gitignore = ".gitignore" in paths
    checks.append(
        ValidationCheck(
            name="Git Ignore",
            status="pass" if has_gitignore else "warning",
            category="security",
            severity="medium",
            message=".gitignore file found" if has_gitignore else ".gitignore file missing",
            details=".gitignore helps prevent sensitive files from being committed",
        )
    )

    gitignore = contents.get(".gitignore")
    if gitignore is not None:
        ignored = ignores_env_file(gitignore)
        checks.append(
            ValidationCheck(
                name="Git Ignore Coverage",
                status="pass" if ignored else "warning",
                category="security",
                severity="medium",
                message=".gitignore excludes .env files"
                if ignored
                else ".gitignore does not exclude .env files",
                details="Environment files usually hold credentials",
            )
        )

    has_security_linting = any(
        "security" in tool.lower() or "audit" in tool.lower() for tool in analysis.linting
    )
    if not has_security_linting:
        checks.append(
            ValidationCheck(
                name="Security Linting",
                status="info",
                category="security",
                severity="low",
                message="Consider adding security linting tools",
                details="Tools like ESLint security plugins can help identify security issues",
            )
        )
    return checks


# --- Performance ---


def _performance_checks(analysis: StackAnalysis) -> list[ValidationCheck]:
    checks = []
    if _is_js(analysis):
        optimized = analysis.build_tool in OPTIMIZING_BUILD_TOOLS
        checks.append(
            ValidationCheck(
                name="Bundle Optimization",
                status="pass" if optimized else "warning",
                category="performance",
                severity="medium",
                message="Build tool with optimization detected"
                if optimized
                else "No optimization tool detected",
                details="Modern build tools help optimize bundle size and performance",
            )
        )

    has_monitoring = any(
        "performance" in d.name or "monitoring" in d.name for d in analysis.dependencies
    )
    if not has_monitoring:
        checks.append(
            ValidationCheck(
                name="Performance Monitoring",
                status="info",
                category="performance",
                severity="low",
                message="Consider adding performance monitoring",
                details="Performance monitoring helps identify bottlenecks in production",
            )
        )
    return checks


def generate_recommendations(
    checks: list[ValidationCheck], analysis: StackAnalysis
) -> list[str]:
    recommendations = []
    if any(c.status == "fail" for c in checks):
        recommendations.append("Address critical issues to improve project stability")
    if any(c.status == "warning" for c in checks):
        recommendations.append("Review warnings to enhance project quality")
    if not analysis.test_framework:
        recommendations.append("Add a testing framework to improve code quality")
    if not analysis.linting:
        recommendations.append("Set up code linting for consistent code style")
    if len(analysis.dependencies) > get_settings().dependency_review_threshold:
        recommendations.append("Consider reviewing dependencies to reduce bundle size")
    return recommendations


def estimate_image_size(analysis: StackAnalysis) -> str:
    base = IMAGE_BASE_MB.get(analysis.primary_language, 100)
    return f"~{base + 2 * len(analysis.dependencies)}MB"


def estimate_build_time(analysis: StackAnalysis) -> str:
    base = BUILD_BASE_SECONDS.get(analysis.primary_language, 30)
    dependency_time = min(0.5 * len(analysis.dependencies), 60)
    return f"~{_round_half_up(base + dependency_time)}s"


def validate_docker_configuration(analysis: StackAnalysis) -> DockerValidation:
    """Heuristic image estimates and container hardening advice."""
    optimizations = []
    if _is_js(analysis):
        optimizations.append("Consider using multi-stage builds to reduce image size")
        optimizations.append("Use .dockerignore to exclude unnecessary files")
    optimizations.append("Pin base image versions for reproducible builds")
    optimizations.append("Scan images for vulnerabilities regularly")

    return DockerValidation(
        dockerfile_valid=True,
        buildable=True,
        estimated_size=estimate_image_size(analysis),
        build_time=estimate_build_time(analysis),
        security_issues=[
            SecurityIssue(
                type="best-practice",
                severity="medium",
                description="Consider using non-root user in Docker container",
                fix="Add USER directive to run container as non-root user",
            )
        ],
        optimizations=optimizations,
    )


def validate_repository(
    files: Iterable[FileEntry],
    analysis: StackAnalysis,
    contents: Mapping[str, str] | None = None,
) -> ValidationResult:
    """Score repository health against the weighted rubric.

    Args:
        files: Full repository listing.
        analysis: Stack analysis of the same repository.
        contents: Optional package.json / requirements.txt / .gitignore contents.

    Returns:
        ValidationResult; is_valid when the score reaches 70.
    """
    paths = [f.path for f in files]
    contents = contents or {}

    checks = [
        *_structure_checks(paths, analysis),
        *_dependency_checks(analysis, contents),
        *_configuration_checks(paths, analysis),
        *_security_checks(paths, analysis, contents),
        *_performance_checks(analysis),
    ]
    score = calculate_score(checks)
    logger.info("Validation score %d/100 over %d checks", score, len(checks))

    return ValidationResult(
        is_valid=score >= PASSING_SCORE,
        score=score,
        checks=checks,
        recommendations=generate_recommendations(checks, analysis),
        docker_validation=validate_docker_configuration(analysis),
    )
