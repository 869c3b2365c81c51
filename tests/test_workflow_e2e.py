"""End-to-end tests for the scan pipeline against a project on disk."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from repodock.exceptions import ListingError
from repodock.sources import LocalDirectorySource
from repodock.workflows import Severity, run_pipeline


@pytest.fixture
def express_project(tmp_path):
    """An Express.js project with a couple of fixable lint findings."""
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "name": "api",
                "scripts": {"start": "node src/index.js", "test": "jest"},
                "dependencies": {"express": "^4.18.0"},
                "devDependencies": {"jest": "^29.0.0"},
            }
        )
    )
    (tmp_path / ".gitignore").write_text("node_modules\n.env\n")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.js").write_text("var port = 3000;\nconsole.log(port);\n")
    (tmp_path / "src" / "app.js").write_text("const app = {};\nmodule.exports = app;\n")
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "app.test.js").write_text("test('ok', () => {});\n")
    return tmp_path


def _suite(result, suite_id):
    return next(s for s in result.suites if s.id == suite_id)


class TestRunPipeline:
    """Test the full pipeline run."""

    @pytest.mark.asyncio
    async def test_scan_without_fix(self, express_project):
        """A plain scan analyzes, generates, validates and checks."""
        result = await run_pipeline(LocalDirectorySource(express_project))

        assert result.analysis.primary_language == "javascript"
        assert result.analysis.framework == "Express.js"
        assert result.generated.source == "deterministic"
        assert result.generated.dockerfile.startswith("# Generated Dockerfile for Express.js")
        assert [s.id for s in result.suites] == ["syntax", "lint", "docker", "build", "security"]
        assert {w.rule for w in _suite(result, "lint").warnings} == {"no-var", "no-console"}
        assert result.fixes == []
        assert result.snapshot["src/index.js"] == "var port = 3000;\nconsole.log(port);\n"

    @pytest.mark.asyncio
    async def test_scan_with_fix(self, express_project, mock_progress, progress_messages):
        """--fix applies fixes once and re-runs the suites on the fixed snapshot."""
        result = await run_pipeline(
            LocalDirectorySource(express_project), fix=True, on_progress=mock_progress
        )

        assert len(result.fixes) == 2
        assert result.snapshot["src/index.js"] == "let port = 3000;\n// console.log removed\n"
        assert _suite(result, "lint").warnings == []
        assert all(s.status == "passed" for s in result.suites)
        assert (Severity.SUCCESS, "Applied 2 automatic fixes") in progress_messages
        # Files on disk are untouched
        assert (express_project / "src" / "index.js").read_text().startswith("var port")

    @pytest.mark.asyncio
    async def test_broken_source_fails(self, express_project):
        """A syntax error fails the run."""
        (express_project / "src" / "broken.js").write_text("function ( {\n")

        result = await run_pipeline(LocalDirectorySource(express_project))

        assert _suite(result, "syntax").status == "failed"
        assert result.passed is False

    @pytest.mark.asyncio
    async def test_enrichment_client(self, express_project):
        """A usable enrichment response replaces the templated Dockerfile."""
        client = MagicMock()
        client.generate = AsyncMock(
            return_value=json.dumps(
                {"dockerfile": 'FROM node:20-alpine\nUSER node\nCMD ["node", "src/index.js"]\n'}
            )
        )

        result = await run_pipeline(LocalDirectorySource(express_project), enrichment=client)

        assert result.generated.source == "enrichment"
        assert result.generated.dockerfile.startswith("FROM node:20-alpine")
        assert "docker-user" not in [w.id for w in _suite(result, "docker").warnings]

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        """A source that cannot be listed aborts the run."""
        with pytest.raises(ListingError):
            await run_pipeline(LocalDirectorySource(tmp_path / "missing"))
