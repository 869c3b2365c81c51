"""Deterministic Docker bundle generation.

Everything here is a pure function of the StackAnalysis: the same analysis
always renders byte-identical files.
"""

import json
import logging

import yaml

from repodock.generation.config import build_docker_config, resolve_port
from repodock.generation.services import (
    APP_CONNECTION_VARS,
    SERVICE_TEMPLATES,
    compose_services,
    service_block,
)
from repodock.generation.templates import (
    DOCKERFILE,
    DOCKERIGNORE_COMMON,
    DOCKERIGNORE_LANGUAGE,
    HEALTHCHECK_OPTIONS,
    README,
)
from repodock.models.analysis import StackAnalysis
from repodock.models.generation import DockerConfig, GeneratedFiles, HealthCheckConfig

logger = logging.getLogger(__name__)

HEALTH_ENDPOINTS: dict[str, str] = {
    "Express.js": "/api/health",
    "Next.js": "/api/health",
    "Django": "/health/",
    "Spring Boot": "/actuator/health",
}


def _label(analysis: StackAnalysis) -> str:
    return analysis.framework or analysis.primary_language


def render_dockerfile(analysis: StackAnalysis, config: DockerConfig) -> str:
    return DOCKERFILE.render(
        label=_label(analysis),
        config=config,
        healthcheck_options=HEALTHCHECK_OPTIONS,
        cmd=json.dumps(config.start_command.split(" ")),
    )


def render_compose(analysis: StackAnalysis, config: DockerConfig) -> str:
    """Render docker-compose.yml with the app and one service per detected database."""
    databases = compose_services(analysis.database)

    environment = [f"{key}={value}" for key, value in config.environment_vars.items()]
    environment.extend(
        f"{name}={url}" for name, url in (APP_CONNECTION_VARS[db] for db in databases)
    )

    app: dict = {
        "build": ".",
        "ports": [f"{config.expose_port}:{config.expose_port}"],
        "environment": environment,
    }
    if databases:
        app["depends_on"] = [SERVICE_TEMPLATES[db]["name"] for db in databases]

    services: dict = {"app": app}
    for db in databases:
        services[SERVICE_TEMPLATES[db]["name"]] = service_block(db)

    document: dict = {"services": services}
    if databases:
        document["volumes"] = {SERVICE_TEMPLATES[db]["volume"][0]: None for db in databases}

    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def render_dockerignore(analysis: StackAnalysis) -> str:
    return DOCKERIGNORE_COMMON + DOCKERIGNORE_LANGUAGE.get(analysis.primary_language, "")


def render_readme(analysis: StackAnalysis, config: DockerConfig) -> str:
    return README.render(
        label=_label(analysis),
        analysis=analysis,
        config=config,
        dev_command="npm run dev" if "dev" in analysis.scripts else config.start_command,
    )


def generate_files(analysis: StackAnalysis) -> GeneratedFiles:
    """Render the Dockerfile, compose file, .dockerignore and README for a stack."""
    config = build_docker_config(analysis)
    logger.debug(
        "Docker config: %s on port %d, CMD %s",
        config.base_image,
        config.expose_port,
        config.start_command,
    )
    return GeneratedFiles(
        dockerfile=render_dockerfile(analysis, config),
        docker_compose=render_compose(analysis, config),
        dockerignore=render_dockerignore(analysis),
        readme=render_readme(analysis, config),
        source="deterministic",
    )


def generate_health_check(analysis: StackAnalysis) -> HealthCheckConfig:
    """Health check endpoint and probe command for the detected framework."""
    endpoint = HEALTH_ENDPOINTS.get(analysis.framework or "", "/health")
    port = resolve_port(analysis)
    return HealthCheckConfig(
        endpoint=endpoint,
        command=f"curl -f http://localhost:{port}{endpoint} || exit 1",
    )
