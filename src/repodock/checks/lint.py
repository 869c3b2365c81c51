"""Lint suite: pattern-based JavaScript and Python rules plus general hygiene."""

import re

from repodock.checks.base import JS_EXTENSIONS, CheckContext, numbered_lines
from repodock.models.testing import TestSuite, TestWarning

CONSOLE_CALL = re.compile(r"console\.log\(")
VAR_DECLARATION = re.compile(r"\bvar\s")
# == or != that is not part of === or !==
LOOSE_EQUALITY = re.compile(r"(?<![=!<>])([=!])=(?!=)")

_IMPORT = re.compile(r"^import\s+(.+)$")
_FROM_IMPORT = re.compile(r"^from\s+\S+\s+import\s+(.+)$")


def _imported_names(statement: str) -> list[str]:
    """Names bound by a single-line import statement."""
    names = []
    for part in statement.split(","):
        part = part.strip()
        if not part or part == "*" or part.startswith("("):
            continue
        if " as " in part:
            names.append(part.split(" as ", 1)[1].strip())
        else:
            names.append(part.split(".", 1)[0])
    return names


def unused_imports(content: str) -> list[tuple[int, str]]:
    """(line number, name) for imported names never referenced elsewhere."""
    lines = content.split("\n")
    unused = []
    for index, line in enumerate(lines):
        stripped = line.strip()
        match = _IMPORT.match(stripped) or _FROM_IMPORT.match(stripped)
        if not match:
            continue
        rest = "\n".join(lines[:index] + lines[index + 1 :])
        for name in _imported_names(match.group(1)):
            if not re.search(rf"\b{re.escape(name)}\b", rest):
                unused.append((index + 1, name))
    return unused


def check_javascript(ctx: CheckContext, suite: TestSuite) -> None:
    for path, content in ctx.files_with_suffix(*JS_EXTENSIONS):
        for number, line in numbered_lines(content):
            index = number - 1
            if CONSOLE_CALL.search(line):
                suite.warnings.append(
                    TestWarning(
                        id=f"eslint-console-{path}-{index}",
                        file=path,
                        line=number,
                        message="Unexpected console statement",
                        rule="no-console",
                        fixable=True,
                        suggested_fix="Remove console.log statement",
                    )
                )
            if VAR_DECLARATION.search(line):
                suite.warnings.append(
                    TestWarning(
                        id=f"eslint-var-{path}-{index}",
                        file=path,
                        line=number,
                        message="Unexpected var, use let or const instead",
                        rule="no-var",
                        fixable=True,
                        suggested_fix="Replace var with let",
                    )
                )
            if LOOSE_EQUALITY.search(line):
                suite.warnings.append(
                    TestWarning(
                        id=f"eslint-equality-{path}-{index}",
                        file=path,
                        line=number,
                        message="Expected === and instead saw ==",
                        rule="eqeqeq",
                        fixable=True,
                        suggested_fix="Use strict equality operators",
                    )
                )


def check_python(ctx: CheckContext, suite: TestSuite) -> None:
    limit = ctx.settings.lint_max_line_length
    for path, content in ctx.files_with_suffix(".py"):
        for number, line in numbered_lines(content):
            if len(line) > limit:
                suite.warnings.append(
                    TestWarning(
                        id=f"python-line-length-{path}-{number - 1}",
                        file=path,
                        line=number,
                        message=f"Line too long (>{limit} characters)",
                        rule="line-too-long",
                    )
                )
        for number, name in unused_imports(content):
            suite.warnings.append(
                TestWarning(
                    id=f"python-unused-import-{path}-{number - 1}",
                    file=path,
                    line=number,
                    message=f"Unused import: {name}",
                    rule="unused-import",
                )
            )


def check_code_quality(ctx: CheckContext, suite: TestSuite) -> None:
    max_lines = ctx.settings.max_file_lines
    for path, content in ctx.snapshot.items():
        lines = content.split("\n")
        for index, line in enumerate(lines):
            if "TODO" in line or "FIXME" in line:
                suite.warnings.append(
                    TestWarning(
                        id=f"todo-{path}-{index}",
                        file=path,
                        line=index + 1,
                        message="TODO/FIXME comment found",
                        rule="todo-comment",
                    )
                )
        if len(lines) > max_lines:
            suite.warnings.append(
                TestWarning(
                    id=f"file-size-{path}",
                    file=path,
                    message=f"File is very large (>{max_lines} lines), consider splitting",
                    rule="file-size",
                )
            )


def run_lint_suite(ctx: CheckContext, suite: TestSuite) -> None:
    if ctx.is_js_project:
        check_javascript(ctx, suite)
    if ctx.analysis.primary_language == "python":
        check_python(ctx, suite)
    check_code_quality(ctx, suite)
