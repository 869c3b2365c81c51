"""Workflow orchestration."""

from repodock.workflows.pipeline import (
    Analyze,
    ApplyFixes,
    FetchManifests,
    Generate,
    PipelineResult,
    RunChecks,
    Validate,
    pipeline_graph,
    run_pipeline,
)
from repodock.workflows.state import PipelineState, Severity

__all__ = [
    # Graph and nodes
    "pipeline_graph",
    "run_pipeline",
    "FetchManifests",
    "Analyze",
    "Generate",
    "Validate",
    "RunChecks",
    "ApplyFixes",
    "PipelineResult",
    # State
    "PipelineState",
    "Severity",
]
