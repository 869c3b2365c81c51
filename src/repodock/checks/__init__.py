"""Static analysis suites and automatic fixes."""

from repodock.checks.fixes import apply_fixes, fix_errors
from repodock.checks.runner import run_checks

__all__ = ["apply_fixes", "fix_errors", "run_checks"]
