"""Scan pipeline workflow using Pydantic Graph."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pydantic_graph import BaseNode, End, Graph, GraphRunContext

from repodock.agents.enrichment import EnrichmentClient
from repodock.analysis import analyze_stack
from repodock.checks import apply_fixes, fix_errors, run_checks
from repodock.exceptions import PipelineError
from repodock.generation import generate_files, generate_with_enrichment
from repodock.models.analysis import FileEntry, StackAnalysis
from repodock.models.generation import GeneratedFiles
from repodock.models.testing import CodeFix, TestSuite
from repodock.models.validation import ValidationResult
from repodock.sources.base import ContentSource
from repodock.sources.fetch import fetch_manifests, fetch_sources
from repodock.validation import validate_repository
from repodock.workflows.state import PipelineState, ProgressCallback, Severity, _noop_progress

Ctx = GraphRunContext[PipelineState, None]


@dataclass
class PipelineResult:
    """Everything one scan produced."""

    files: list[FileEntry]
    analysis: StackAnalysis
    generated: GeneratedFiles
    validation: ValidationResult
    suites: list[TestSuite]
    fixes: list[CodeFix]
    snapshot: Mapping[str, str]

    @property
    def passed(self) -> bool:
        return self.validation.is_valid and all(s.status == "passed" for s in self.suites)


def _result(state: PipelineState) -> PipelineResult:
    if state.analysis is None or state.generated is None or state.validation is None:
        raise PipelineError("Pipeline ended before analysis, generation and validation ran")
    return PipelineResult(
        files=state.files,
        analysis=state.analysis,
        generated=state.generated,
        validation=state.validation,
        suites=state.suites,
        fixes=state.fixes,
        snapshot=state.snapshot,
    )


@dataclass
class FetchManifests(BaseNode[PipelineState]):
    """List the repository and fetch manifests and source files."""

    async def run(self, ctx: Ctx) -> Analyze:
        progress = ctx.state.on_progress
        progress(Severity.INFO, "Listing repository...")
        # ListingError propagates: nothing can be analyzed without a listing.
        files = await ctx.state.source.list_files()
        ctx.state.files = files

        manifests = await fetch_manifests(ctx.state.source, files)
        sources = await fetch_sources(ctx.state.source, files, skip=manifests)
        ctx.state.manifests = manifests
        ctx.state.snapshot = MappingProxyType({**manifests, **sources})

        progress(
            Severity.SUCCESS,
            f"Found {len(files)} entries, fetched {len(manifests)} manifests "
            f"and {len(sources)} source files",
        )
        return Analyze()


@dataclass
class Analyze(BaseNode[PipelineState]):
    """Infer the technology stack."""

    async def run(self, ctx: Ctx) -> Generate:
        progress = ctx.state.on_progress
        progress(Severity.INFO, "Analyzing stack...")
        analysis = analyze_stack(ctx.state.files, ctx.state.manifests)
        ctx.state.analysis = analysis

        framework = analysis.framework or "no framework"
        progress(Severity.SUCCESS, f"Detected {analysis.primary_language} ({framework})")
        return Generate()


@dataclass
class Generate(BaseNode[PipelineState]):
    """Generate the Docker bundle, through the enrichment service when configured."""

    async def run(self, ctx: Ctx) -> Validate:
        progress = ctx.state.on_progress
        analysis = ctx.state.analysis

        if ctx.state.enrichment is not None:
            progress(Severity.INFO, "Generating Docker files with enrichment...")
            generated = await generate_with_enrichment(
                analysis, ctx.state.enrichment, ctx.state.files
            )
            if generated.source != "enrichment":
                progress(Severity.WARNING, "Enrichment unavailable, used deterministic templates")
        else:
            progress(Severity.INFO, "Generating Docker files...")
            generated = generate_files(analysis)

        ctx.state.generated = generated
        progress(Severity.SUCCESS, "Docker files generated")
        return Validate()


@dataclass
class Validate(BaseNode[PipelineState]):
    """Score repository health."""

    async def run(self, ctx: Ctx) -> RunChecks:
        progress = ctx.state.on_progress
        progress(Severity.INFO, "Validating repository...")
        result = validate_repository(ctx.state.files, ctx.state.analysis, ctx.state.manifests)
        ctx.state.validation = result

        if result.is_valid:
            progress(Severity.SUCCESS, f"Validation passed (score: {result.score}/100)")
        else:
            progress(Severity.WARNING, f"Validation failed (score: {result.score}/100)")
        return RunChecks()


@dataclass
class RunChecks(BaseNode[PipelineState, None, PipelineResult]):
    """Run the static analysis suites."""

    async def run(self, ctx: Ctx) -> ApplyFixes | End[PipelineResult]:
        progress = ctx.state.on_progress
        progress(Severity.INFO, "Running static analysis...")
        suites = run_checks(ctx.state.analysis, ctx.state.generated, ctx.state.snapshot)
        ctx.state.suites = suites

        errors = sum(len(s.errors) for s in suites)
        warnings = sum(len(s.warnings) for s in suites)
        severity = Severity.SUCCESS if errors == 0 else Severity.WARNING
        progress(severity, f"Static analysis: {errors} errors, {warnings} warnings")

        if ctx.state.fix and not ctx.state.fixes_applied:
            return ApplyFixes()
        return End(_result(ctx.state))


@dataclass
class ApplyFixes(BaseNode[PipelineState, None, PipelineResult]):
    """Apply automatic fixes once, then re-run the suites to confirm."""

    async def run(self, ctx: Ctx) -> RunChecks | End[PipelineResult]:
        progress = ctx.state.on_progress
        ctx.state.fixes_applied = True

        findings = [f for s in ctx.state.suites for f in (*s.errors, *s.warnings)]
        fixes = fix_errors(findings, ctx.state.snapshot)
        if not fixes:
            progress(Severity.INFO, "No automatic fixes available")
            return End(_result(ctx.state))

        ctx.state.fixes = fixes
        ctx.state.snapshot = apply_fixes(ctx.state.snapshot, fixes)
        progress(Severity.SUCCESS, f"Applied {len(fixes)} automatic fixes")
        return RunChecks()


pipeline_graph = Graph(
    nodes=[FetchManifests, Analyze, Generate, Validate, RunChecks, ApplyFixes],
    state_type=PipelineState,
)


async def run_pipeline(
    source: ContentSource,
    *,
    fix: bool = False,
    enrichment: EnrichmentClient | None = None,
    on_progress: ProgressCallback = _noop_progress,
) -> PipelineResult:
    """Run the full scan against a content source.

    Raises:
        ListingError: If the source cannot list the repository.
    """
    state = PipelineState(source=source, fix=fix, enrichment=enrichment, on_progress=on_progress)
    result = await pipeline_graph.run(FetchManifests(), state=state)
    return result.output
