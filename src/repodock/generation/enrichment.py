"""Enrichment-backed generation with deterministic fallback."""

import asyncio
import logging
from collections.abc import Iterable

from repodock.agents.enrichment import EnrichmentClient
from repodock.generation.config import build_docker_config
from repodock.generation.generator import generate_files, generate_health_check
from repodock.generation.templates import ENRICHMENT_PROMPT
from repodock.models.analysis import FileEntry, StackAnalysis
from repodock.models.generation import (
    EnrichedFiles,
    GeneratedFiles,
    HealthCheckConfig,
    strip_markdown_fences,
)
from repodock.settings import get_settings

logger = logging.getLogger(__name__)


def build_prompt(analysis: StackAnalysis, files: Iterable[FileEntry] | None = None) -> str:
    paths = [f.path for f in files or () if f.kind == "file"]
    return ENRICHMENT_PROMPT.render(
        analysis=analysis,
        paths=paths,
        config=build_docker_config(analysis),
    )


def merge_enriched(
    analysis: StackAnalysis, baseline: GeneratedFiles, enriched: EnrichedFiles
) -> GeneratedFiles:
    """Overlay an enrichment response on the deterministic bundle."""
    health_check = generate_health_check(analysis)
    if enriched.health_check:
        health_check = HealthCheckConfig.model_validate(
            {**health_check.model_dump(), **enriched.health_check}
        )

    return GeneratedFiles(
        dockerfile=enriched.dockerfile,
        docker_compose=strip_markdown_fences(enriched.docker_compose)
        if enriched.docker_compose
        else baseline.docker_compose,
        dockerignore=enriched.dockerignore or baseline.dockerignore,
        readme=enriched.readme or baseline.readme,
        health_check=health_check,
        security_recommendations=enriched.security_recommendations,
        optimizations=enriched.optimizations,
        estimated_size=enriched.estimated_size,
        build_time=enriched.build_time,
        source="enrichment",
    )


async def generate_with_enrichment(
    analysis: StackAnalysis,
    client: EnrichmentClient,
    files: Iterable[FileEntry] | None = None,
) -> GeneratedFiles:
    """Generate the bundle through an enrichment service.

    Any failure (client error, timeout, unparseable or incomplete response)
    falls back to the deterministic bundle. Never raises.

    Args:
        analysis: Stack to containerize.
        client: Enrichment client to prompt.
        files: Optional repository listing; a sample is included in the prompt.

    Returns:
        GeneratedFiles with source "enrichment", or the deterministic bundle.
    """
    baseline = generate_files(analysis)
    prompt = build_prompt(analysis, files)
    timeout = get_settings().enrichment_timeout

    try:
        raw = await asyncio.wait_for(client.generate(prompt), timeout=timeout)
        enriched = EnrichedFiles.model_validate_json(strip_markdown_fences(raw))
        result = merge_enriched(analysis, baseline, enriched)
    except Exception as e:
        logger.warning("Enrichment failed, using deterministic generation: %s", e)
        return baseline

    logger.info("Generated Docker bundle via enrichment service")
    return result
