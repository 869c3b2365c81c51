"""Build suite: scripts and declared dependencies."""

from repodock.checks.base import CheckContext
from repodock.models.testing import TestSuite, TestWarning

MANIFEST_FILES = {
    "python": "requirements.txt",
    "java": "pom.xml",
    "rust": "Cargo.toml",
    "go": "go.mod",
}


def run_build_suite(ctx: CheckContext, suite: TestSuite) -> None:
    analysis = ctx.analysis
    manifest = MANIFEST_FILES.get(analysis.primary_language, "package.json")

    if "build" not in analysis.scripts and "start" not in analysis.scripts:
        suite.warnings.append(
            TestWarning(
                id="no-build-script",
                file=manifest,
                message="No build or start script found",
                rule="build-script",
            )
        )

    if not analysis.dependencies:
        suite.warnings.append(
            TestWarning(
                id="no-dependencies",
                file=manifest,
                message="No production dependencies found",
                rule="dependencies",
            )
        )

    seen: set[str] = set()
    for dep in analysis.dependencies:
        if dep.name in seen:
            suite.warnings.append(
                TestWarning(
                    id=f"duplicate-dep-{dep.name}",
                    file=manifest,
                    message=f"Duplicate dependency: {dep.name}",
                    rule="duplicate-dependency",
                )
            )
        seen.add(dep.name)
