"""Pydantic models for generated Docker artifacts."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def strip_markdown_fences(content: str) -> str:
    """Strip markdown code fences from content if present."""
    content = content.strip()
    # Remove ```json, ```dockerfile, ```yaml, or ``` at start
    for prefix in ("```json", "```dockerfile", "```yaml", "```"):
        if content.startswith(prefix):
            content = content[len(prefix) :]
            break
    # Remove ``` at end
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


class DockerConfig(BaseModel):
    """Resolved Docker build configuration for a stack."""

    base_image: str
    workdir: str = "/app"
    copy_instructions: list[str] = []
    run_instructions: list[str] = []
    expose_port: int
    start_command: str
    environment_vars: dict[str, str] = {}


class HealthCheckConfig(BaseModel):
    """Container health check settings."""

    endpoint: str = "/health"
    command: str
    interval: str = "30s"
    timeout: str = "10s"
    retries: int = 3
    start_period: str = "60s"


class GeneratedFiles(BaseModel):
    """Containerization bundle handed to the caller."""

    dockerfile: str
    docker_compose: str | None = None
    dockerignore: str
    readme: str

    # Only produced by the enrichment path
    health_check: HealthCheckConfig | None = None
    security_recommendations: list[str] | None = None
    optimizations: list[str] | None = None
    estimated_size: str | None = None
    build_time: str | None = None

    source: Literal["deterministic", "enrichment"] = "deterministic"


class EnrichedFiles(BaseModel):
    """Shape of a parseable enrichment service response.

    Everything but the Dockerfile is optional; missing fields keep their
    deterministic values.
    """

    model_config = ConfigDict(populate_by_name=True)

    dockerfile: str = Field(min_length=1)
    docker_compose: str | None = Field(default=None, alias="dockerCompose")
    dockerignore: str | None = None
    readme: str | None = None
    health_check: dict | None = Field(default=None, alias="healthCheck")
    security_recommendations: list[str] | None = Field(
        default=None, alias="securityRecommendations"
    )
    optimizations: list[str] | None = None
    estimated_size: str | None = Field(default=None, alias="estimatedSize")
    build_time: str | None = Field(default=None, alias="buildTime")

    @field_validator("dockerfile", mode="after")
    @classmethod
    def strip_fences(cls, v: str) -> str:
        """Strip markdown code fences if the model included them."""
        stripped = strip_markdown_fences(v)
        if not stripped:
            raise ValueError("dockerfile is empty")
        return stripped
