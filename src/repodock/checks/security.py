"""Security suite: hardcoded secrets and eval usage."""

import re

from repodock.checks.base import CheckContext, numbered_lines
from repodock.models.testing import TestError, TestSuite, TestWarning

HARDCODED_SECRET = re.compile(
    r"""(password|secret|key|token)\s*[:=]\s*['"][^'"]+['"]""", re.IGNORECASE
)


def run_security_suite(ctx: CheckContext, suite: TestSuite) -> None:
    for path, content in ctx.snapshot.items():
        for number, line in numbered_lines(content):
            index = number - 1
            if HARDCODED_SECRET.search(line):
                suite.errors.append(
                    TestError(
                        id=f"hardcoded-secret-{path}-{index}",
                        file=path,
                        line=number,
                        message="Potential hardcoded secret detected",
                        rule="hardcoded-secret",
                        fixable=True,
                        suggested_fix="Move secrets to environment variables",
                    )
                )
            if "eval(" in line:
                suite.warnings.append(
                    TestWarning(
                        id=f"eval-usage-{path}-{index}",
                        file=path,
                        line=number,
                        message="Use of eval() detected - potential security risk",
                        rule="no-eval",
                    )
                )
