"""Syntax suite: JavaScript, JSON, Dockerfile instructions and a Python heuristic."""

import json
import re

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from repodock.checks.base import CheckContext, numbered_lines
from repodock.models.testing import TestError, TestSuite, TestWarning

JS_LANGUAGE = Language(tree_sitter_javascript.language())

DOCKER_INSTRUCTIONS = frozenset(
    {
        "FROM",
        "RUN",
        "CMD",
        "LABEL",
        "EXPOSE",
        "ENV",
        "ADD",
        "COPY",
        "ENTRYPOINT",
        "VOLUME",
        "USER",
        "WORKDIR",
        "ARG",
        "ONBUILD",
        "STOPSIGNAL",
        "HEALTHCHECK",
        "SHELL",
    }
)

MISSING_TOKEN_NAMES = {
    ";": "semicolon",
    ",": "comma",
    ")": "closing bracket",
    "]": "closing bracket",
    "}": "closing bracket",
}

# Parser messages with a mechanical fix
FIXABLE_SYNTAX = {
    "missing semicolon": "Add missing semicolon",
    "missing comma": "Add missing comma",
    "missing closing bracket": "Add missing closing bracket",
    "unexpected token": None,
}

_PYTHON_BLOCK_KEYWORD = re.compile(
    r"^(if|else|elif|for|while|def|class|try|except|finally|with|async|match|case)"
)


def first_syntax_error(node: Node) -> Node | None:
    """First ERROR or MISSING node in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_missing or current.type == "ERROR":
            return current
        stack.extend(
            reversed([child for child in current.children if child.has_error or child.is_missing])
        )
    return None


def _syntax_message(node: Node) -> str:
    if node.is_missing:
        return f"Syntax error: missing {MISSING_TOKEN_NAMES.get(node.type, repr(node.type))}"
    return "Syntax error: unexpected token"


def check_javascript(ctx: CheckContext, suite: TestSuite) -> None:
    parser = Parser(JS_LANGUAGE)
    for path, content in ctx.files_with_suffix(".js", ".jsx"):
        tree = parser.parse(content.encode("utf-8"))
        if not tree.root_node.has_error:
            continue
        node = first_syntax_error(tree.root_node)
        if node is None:
            continue
        message = _syntax_message(node)
        key = next((k for k in FIXABLE_SYNTAX if k in message.lower()), None)
        row, column = node.start_point
        suite.errors.append(
            TestError(
                id=f"syntax-{path}",
                file=path,
                line=row + 1,
                column=column + 1,
                message=message,
                fixable=key is not None,
                suggested_fix=FIXABLE_SYNTAX.get(key) if key else None,
            )
        )


def check_python(ctx: CheckContext, suite: TestSuite) -> None:
    for path, content in ctx.files_with_suffix(".py"):
        for number, line in numbered_lines(content):
            stripped = line.strip()
            if stripped.endswith(":") and not _PYTHON_BLOCK_KEYWORD.match(stripped):
                suite.warnings.append(
                    TestWarning(
                        id=f"python-syntax-{path}-{number - 1}",
                        file=path,
                        line=number,
                        message="Potential syntax issue: unexpected colon",
                        rule="python-syntax",
                    )
                )


def check_json(ctx: CheckContext, suite: TestSuite) -> None:
    for path, content in ctx.files_with_suffix(".json"):
        try:
            json.loads(content)
        except ValueError as e:
            suite.errors.append(
                TestError(
                    id=f"json-{path}",
                    file=path,
                    message=f"Invalid JSON: {e}",
                    fixable=True,
                    suggested_fix="Fix JSON syntax errors",
                )
            )


def check_dockerfile(ctx: CheckContext, suite: TestSuite) -> None:
    continued = False
    for number, line in numbered_lines(ctx.generated.dockerfile):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        is_continuation = continued
        continued = stripped.endswith("\\")
        if is_continuation:
            continue
        instruction = stripped.split(" ", 1)[0].upper()
        if instruction not in DOCKER_INSTRUCTIONS:
            suite.errors.append(
                TestError(
                    id=f"dockerfile-{number - 1}",
                    file="Dockerfile",
                    line=number,
                    message=f"Unknown Docker instruction: {instruction}",
                )
            )


def run_syntax_suite(ctx: CheckContext, suite: TestSuite) -> None:
    if ctx.is_js_project:
        check_javascript(ctx, suite)
    if ctx.analysis.primary_language == "python":
        check_python(ctx, suite)
    check_json(ctx, suite)
    check_dockerfile(ctx, suite)
