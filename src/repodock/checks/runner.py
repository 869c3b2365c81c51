"""Run the static analysis suites in order, isolating failures per suite."""

import logging
from collections.abc import Callable, Mapping

from repodock.checks.base import CheckContext
from repodock.checks.build import run_build_suite
from repodock.checks.docker import run_docker_suite
from repodock.checks.lint import run_lint_suite
from repodock.checks.security import run_security_suite
from repodock.checks.syntax import run_syntax_suite
from repodock.models.analysis import StackAnalysis
from repodock.models.generation import GeneratedFiles
from repodock.models.testing import SuiteType, TestError, TestSuite
from repodock.settings import get_settings

logger = logging.getLogger(__name__)

SuiteCheck = Callable[[CheckContext, TestSuite], None]

# id, display name, type, file blamed for a crash, check
SUITES: tuple[tuple[str, str, SuiteType, str, SuiteCheck], ...] = (
    ("syntax", "Syntax Validation", "syntax", "unknown", run_syntax_suite),
    ("lint", "Code Linting", "lint", "unknown", run_lint_suite),
    ("docker", "Docker Validation", "build", "Dockerfile", run_docker_suite),
    ("build", "Build Validation", "build", "build", run_build_suite),
    ("security", "Security Validation", "lint", "security", run_security_suite),
)


def run_checks(
    analysis: StackAnalysis,
    generated: GeneratedFiles,
    snapshot: Mapping[str, str],
) -> list[TestSuite]:
    """Run every suite against the generated bundle and project snapshot.

    A suite that crashes keeps its findings so far plus one non-fixable
    `<suite>-error`; the remaining suites still run.
    """
    ctx = CheckContext(
        analysis=analysis,
        generated=generated,
        snapshot=snapshot,
        settings=get_settings(),
    )
    suites = []
    for suite_id, name, suite_type, crash_file, check in SUITES:
        suite = TestSuite(id=suite_id, name=name, type=suite_type)
        try:
            check(ctx, suite)
        except Exception as e:
            logger.exception("%s suite crashed", name)
            suite.errors.append(
                TestError(
                    id=f"{suite_id}-error",
                    file=crash_file,
                    message=str(e) or type(e).__name__,
                )
            )
        suites.append(suite)

    logger.info(
        "Static analysis completed: %d errors, %d warnings",
        sum(len(s.errors) for s in suites),
        sum(len(s.warnings) for s in suites),
    )
    return suites
