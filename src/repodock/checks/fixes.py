"""Automatic fixes for a fixed set of lint rules."""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from repodock.checks.lint import LOOSE_EQUALITY
from repodock.models.testing import CodeFix, Finding

logger = logging.getLogger(__name__)

_CONSOLE_STATEMENT = re.compile(r"console\.log\((?:[^()]|\([^()]*\))*\);?")
_VAR_KEYWORD = re.compile(r"\bvar(?=\s)")


def remove_console(line: str) -> str:
    match = _CONSOLE_STATEMENT.search(line)
    if match is None:
        return line
    # Only a line holding nothing but the call is rewritten.
    if (line[: match.start()] + line[match.end() :]).strip():
        return line
    return line[: match.start()] + "// console.log removed" + line[match.end() :]


def var_to_let(line: str) -> str:
    return _VAR_KEYWORD.sub("let", line, count=1)


def strict_equality(line: str) -> str:
    return LOOSE_EQUALITY.sub(r"\1==", line)


FIX_TRANSFORMS: dict[str, tuple[Callable[[str], str], str]] = {
    "no-console": (remove_console, "Removed console.log statement"),
    "no-var": (var_to_let, "Replaced var with let"),
    "eqeqeq": (strict_equality, "Replaced == with === and != with !=="),
}


def fix_errors(findings: Iterable[Finding], snapshot: Mapping[str, str]) -> list[CodeFix]:
    """Produce one CodeFix per fixable finding with a registered transform.

    Fixes to the same file are chained: each CodeFix starts from the content
    left by the previous one, so applying them in order is consistent.

    Args:
        findings: Errors and warnings from run_checks.
        snapshot: Project file contents the findings refer to.

    Returns:
        Fixes in finding order. Findings without a usable fix are skipped.
    """
    current: dict[str, str] = {}
    fixes: list[CodeFix] = []

    for finding in findings:
        if not finding.fixable:
            continue
        entry = FIX_TRANSFORMS.get(finding.rule or "")
        if entry is None:
            logger.debug("No automatic fix for %s (%s)", finding.id, finding.rule)
            continue
        content = current.get(finding.file, snapshot.get(finding.file))
        if content is None or finding.line is None:
            logger.debug("Cannot locate %s in %s", finding.id, finding.file)
            continue

        lines = content.split("\n")
        index = finding.line - 1
        if not 0 <= index < len(lines):
            logger.debug("Line %d out of range for %s", finding.line, finding.file)
            continue

        transform, description = entry
        fixed_line = transform(lines[index])
        if fixed_line == lines[index]:
            continue
        lines[index] = fixed_line
        fixed = "\n".join(lines)

        fixes.append(
            CodeFix(file=finding.file, original=content, fixed=fixed, description=description)
        )
        current[finding.file] = fixed

    logger.info("Generated %d automatic fixes", len(fixes))
    return fixes


def apply_fixes(
    snapshot: Mapping[str, str], fixes: Iterable[CodeFix]
) -> MappingProxyType[str, str]:
    """Return a new read-only snapshot with the fixes applied in order."""
    updated = dict(snapshot)
    for fix in fixes:
        updated[fix.file] = fix.fixed
    return MappingProxyType(updated)
