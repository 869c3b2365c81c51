"""Docker suite: Dockerfile best practices and compose structure."""

import re

import yaml

from repodock.checks.base import CheckContext
from repodock.models.testing import TestError, TestSuite, TestWarning


def _has_instruction(lines: list[str], instruction: str) -> bool:
    """Check if Dockerfile contains a specific instruction."""
    pattern = re.compile(rf"^\s*{instruction}\s+", re.IGNORECASE)
    return any(pattern.match(line) for line in lines)


def _count_instruction(lines: list[str], instruction: str) -> int:
    pattern = re.compile(rf"^\s*{instruction}\s+", re.IGNORECASE)
    return sum(1 for line in lines if pattern.match(line))


def check_dockerfile(ctx: CheckContext, suite: TestSuite) -> None:
    lines = ctx.generated.dockerfile.split("\n")

    if not _has_instruction(lines, "USER"):
        suite.warnings.append(
            TestWarning(
                id="docker-user",
                file="Dockerfile",
                message="Consider adding USER instruction for security",
                rule="docker-user",
            )
        )

    if not _has_instruction(lines, "HEALTHCHECK"):
        suite.suggestions.append("Consider adding HEALTHCHECK instruction")

    if _count_instruction(lines, "RUN") > ctx.settings.max_run_instructions:
        suite.warnings.append(
            TestWarning(
                id="docker-layers",
                file="Dockerfile",
                message="Consider combining RUN commands to reduce layers",
                rule="docker-layers",
            )
        )


def check_compose(ctx: CheckContext, suite: TestSuite) -> None:
    compose = ctx.generated.docker_compose
    if not compose:
        return
    try:
        document = yaml.safe_load(compose)
    except yaml.YAMLError:
        suite.errors.append(
            TestError(
                id="compose-syntax",
                file="docker-compose.yml",
                message="Invalid YAML syntax in docker-compose.yml",
                rule="compose-syntax",
                fixable=True,
                suggested_fix="Fix YAML syntax errors",
            )
        )
        return

    if not isinstance(document, dict):
        suite.errors.append(
            TestError(
                id="compose-invalid",
                file="docker-compose.yml",
                message="Invalid docker-compose.yml structure",
                rule="compose-invalid",
            )
        )
    elif "services" not in document:
        suite.warnings.append(
            TestWarning(
                id="compose-services",
                file="docker-compose.yml",
                message="docker-compose.yml defines no services",
                rule="compose-services",
            )
        )


def run_docker_suite(ctx: CheckContext, suite: TestSuite) -> None:
    check_dockerfile(ctx, suite)
    check_compose(ctx, suite)
