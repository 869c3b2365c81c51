"""Docker bundle generation."""

from repodock.generation.config import build_docker_config
from repodock.generation.enrichment import generate_with_enrichment
from repodock.generation.generator import generate_files, generate_health_check

__all__ = [
    "build_docker_config",
    "generate_files",
    "generate_health_check",
    "generate_with_enrichment",
]
