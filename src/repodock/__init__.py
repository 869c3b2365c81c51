"""Repository stack analysis, Docker artifact generation and health checks."""

__version__ = "0.1.0"
