"""Command-line interface for repodock."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from repodock.agents.enrichment import (
    AgentEnrichmentClient,
    EnrichmentClient,
    HttpEnrichmentClient,
)
from repodock.exceptions import ListingError
from repodock.settings import get_settings
from repodock.sources import LocalDirectorySource
from repodock.workflows.pipeline import PipelineResult, run_pipeline
from repodock.workflows.state import Severity

# Generated bundle file names under --output
OUTPUT_FILES = {
    "dockerfile": "Dockerfile",
    "docker_compose": "docker-compose.yml",
    "dockerignore": ".dockerignore",
    "readme": "README.md",
}

STATUS_STYLES = {
    "pass": "green",
    "info": "blue",
    "warning": "yellow",
    "fail": "red",
}


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(rich_tracebacks=True, show_path=False, console=Console(stderr=True))
        ],
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def _configure_logfire() -> None:
    """Configure logfire when a token is present."""
    settings = get_settings()
    if not settings.logfire_token:
        return

    import logfire

    logfire.configure(
        service_name="repodock",
        token=settings.logfire_token,
        send_to_logfire="if-token-present",
    )
    logfire.instrument_pydantic_ai()


app = typer.Typer(
    name="repodock",
    help="Repository stack analysis and Docker bundle generation.",
)


@app.callback()
def main() -> None:
    """Analyze repositories and generate Docker configuration."""


def _validate_project_path(path: Path) -> Path:
    if not path.exists():
        raise typer.BadParameter(f"Path does not exist: {path}")
    if not path.is_dir():
        raise typer.BadParameter(f"Path is not a directory: {path}")
    return path.resolve()


def _make_progress_callback(console: Console):
    """Create a Rich-based progress callback."""
    severity_styles = {
        Severity.INFO: ("blue", ""),
        Severity.SUCCESS: ("green", "✓"),
        Severity.WARNING: ("yellow", "!"),
        Severity.ERROR: ("red", "✗"),
    }

    def callback(severity: Severity, message: str) -> None:
        color, icon = severity_styles[severity]
        if icon:
            console.print(f"  [{color}]{icon}[/{color}] {message}")
        else:
            console.print(f"  [{color}]•[/{color}] {message}")

    return callback


def _make_enrichment_client() -> EnrichmentClient:
    settings = get_settings()
    if settings.enrichment_url:
        return HttpEnrichmentClient(settings.enrichment_url)
    return AgentEnrichmentClient()


def _result_payload(result: PipelineResult) -> dict:
    return {
        "analysis": result.analysis.model_dump(mode="json"),
        "generated": result.generated.model_dump(mode="json"),
        "validation": result.validation.model_dump(mode="json"),
        "suites": [s.model_dump(mode="json") for s in result.suites],
        "fixes": [f.model_dump(mode="json") for f in result.fixes],
    }


def _print_report(console: Console, result: PipelineResult) -> None:
    analysis = result.analysis

    stack = Table(title="Stack", show_header=False)
    stack.add_column("Field", style="bold")
    stack.add_column("Value")
    stack.add_row("Language", analysis.primary_language)
    stack.add_row("Framework", analysis.framework or "-")
    stack.add_row("Package manager", analysis.package_manager or "-")
    stack.add_row("Runtime", analysis.runtime or "-")
    stack.add_row("Build tool", analysis.build_tool or "-")
    stack.add_row("Test framework", analysis.test_framework or "-")
    stack.add_row("Databases", ", ".join(analysis.database) or "-")
    stack.add_row(
        "Dependencies",
        f"{len(analysis.dependencies)} runtime, {len(analysis.dev_dependencies)} dev",
    )
    console.print(stack)

    validation = result.validation
    checks = Table(title=f"Validation: {validation.score}/100")
    checks.add_column("Check")
    checks.add_column("Status")
    checks.add_column("Message")
    for check in validation.checks:
        style = STATUS_STYLES[check.status]
        checks.add_row(check.name, f"[{style}]{check.status}[/{style}]", check.message)
    console.print(checks)
    for recommendation in validation.recommendations:
        console.print(f"  [dim]→ {recommendation}[/dim]")

    suites = Table(title="Static analysis")
    suites.add_column("Suite")
    suites.add_column("Status")
    suites.add_column("Errors", justify="right")
    suites.add_column("Warnings", justify="right")
    for suite in result.suites:
        style = "green" if suite.status == "passed" else "red"
        suites.add_row(
            suite.name,
            f"[{style}]{suite.status}[/{style}]",
            str(len(suite.errors)),
            str(len(suite.warnings)),
        )
    console.print(suites)

    for suite in result.suites:
        for error in suite.errors:
            location = f"{error.file}:{error.line}" if error.line else error.file
            console.print(f"  [red]✗[/red] {location} {error.message}")

    for fix in result.fixes:
        console.print(f"  [green]✓[/green] {fix.file}: {fix.description}")


def _write_bundle(output: Path, result: PipelineResult) -> list[Path]:
    output.mkdir(parents=True, exist_ok=True)
    written = []
    for field_name, filename in OUTPUT_FILES.items():
        content = getattr(result.generated, field_name)
        if content is None:
            continue
        path = output / filename
        path.write_text(content)
        written.append(path)
    return written


@app.command()
def scan(
    project_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the repository to scan. Defaults to current directory.",
        ),
    ] = Path("."),
    fix: Annotated[
        bool,
        typer.Option("--fix", help="Apply automatic fixes and re-run static analysis."),
    ] = False,
    enrich: Annotated[
        bool,
        typer.Option("--enrich", help="Generate Docker files through the enrichment service."),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Directory to write the generated Docker files to."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print results as JSON."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Analyze a repository, generate Docker files and run static analysis."""
    _setup_logging(verbose)
    _configure_logfire()
    project_path = _validate_project_path(project_path)
    console = Console()
    status_console = Console(stderr=True)

    status_console.print(f"\n[bold]repodock[/bold] - scanning {project_path.name}\n")

    try:
        result = asyncio.run(
            run_pipeline(
                LocalDirectorySource(project_path),
                fix=fix,
                enrichment=_make_enrichment_client() if enrich else None,
                on_progress=_make_progress_callback(status_console),
            )
        )
    except ListingError as e:
        status_console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=2) from e
    except KeyboardInterrupt:
        status_console.print("\n[yellow]Cancelled[/yellow]")
        sys.exit(130)

    if as_json:
        console.print_json(data=_result_payload(result))
    else:
        _print_report(console, result)

    if output is not None:
        for path in _write_bundle(output, result):
            status_console.print(f"  [dim]wrote {path}[/dim]")

    if not result.passed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
