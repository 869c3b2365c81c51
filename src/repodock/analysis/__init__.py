"""Stack analysis."""

from repodock.analysis.stack import analyze_stack, detect_primary_language

__all__ = ["analyze_stack", "detect_primary_language"]
