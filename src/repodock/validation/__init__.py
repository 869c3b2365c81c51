"""Repository health validation."""

from repodock.validation.repository import (
    calculate_score,
    validate_docker_configuration,
    validate_repository,
)

__all__ = ["calculate_score", "validate_docker_configuration", "validate_repository"]
