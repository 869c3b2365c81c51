"""Tests for CLI module."""

import json
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from repodock.agents.enrichment import AgentEnrichmentClient, HttpEnrichmentClient
from repodock.cli.main import (
    _make_enrichment_client,
    _make_progress_callback,
    _validate_project_path,
    app,
)
from repodock.workflows.state import Severity

runner = CliRunner()


@pytest.fixture
def project(tmp_path):
    """A minimal Express.js project."""
    (tmp_path / "package.json").write_text(
        json.dumps(
            {
                "name": "api",
                "scripts": {"start": "node src/index.js"},
                "dependencies": {"express": "^4.18.0"},
            }
        )
    )
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.js").write_text("const port = 3000;\n")
    (tmp_path / "src" / "routes.js").write_text("module.exports = [];\n")
    return tmp_path


class TestValidateProjectPath:
    """Test _validate_project_path function."""

    def test_valid_directory(self, tmp_path):
        """Valid directory path is accepted."""
        assert _validate_project_path(tmp_path) == tmp_path.resolve()

    def test_nonexistent_path_raises(self, tmp_path):
        """Nonexistent path raises BadParameter."""
        with pytest.raises(typer.BadParameter, match="does not exist"):
            _validate_project_path(tmp_path / "does_not_exist")

    def test_file_path_raises(self, tmp_path):
        """File path (not directory) raises BadParameter."""
        file_path = tmp_path / "file.txt"
        file_path.touch()
        with pytest.raises(typer.BadParameter, match="not a directory"):
            _validate_project_path(file_path)


class TestMakeProgressCallback:
    """Test _make_progress_callback function."""

    def test_prints_info_message(self):
        """Progress callback prints info messages."""
        console = MagicMock()
        callback = _make_progress_callback(console)

        callback(Severity.INFO, "Test message")

        console.print.assert_called_once()
        call_args = console.print.call_args[0][0]
        assert "blue" in call_args
        assert "Test message" in call_args

    @pytest.mark.parametrize(
        ("severity", "color", "icon"),
        [
            (Severity.SUCCESS, "green", "✓"),
            (Severity.WARNING, "yellow", "!"),
            (Severity.ERROR, "red", "✗"),
        ],
    )
    def test_prints_icons(self, severity, color, icon):
        """Non-info severities carry a colored icon."""
        console = MagicMock()
        callback = _make_progress_callback(console)

        callback(severity, "message")

        call_args = console.print.call_args[0][0]
        assert color in call_args
        assert icon in call_args


class TestMakeEnrichmentClient:
    """Test enrichment client selection."""

    def test_http_client_when_url_configured(self, monkeypatch):
        """A configured service URL selects the HTTP client."""
        monkeypatch.setenv("REPODOCK_ENRICHMENT_URL", "http://localhost:11434/")

        client = _make_enrichment_client()

        assert isinstance(client, HttpEnrichmentClient)
        assert client.base_url == "http://localhost:11434"

    def test_agent_client_by_default(self):
        """Without a service URL the agent client is used."""
        assert isinstance(_make_enrichment_client(), AgentEnrichmentClient)


class TestScanCommand:
    """Test repodock scan."""

    def test_json_output(self, project):
        """--json prints the analysis as JSON."""
        result = runner.invoke(app, ["scan", str(project), "--json"])

        assert result.exit_code in (0, 1)
        assert '"primary_language": "javascript"' in result.stdout
        assert '"framework": "Express.js"' in result.stdout

    def test_table_output(self, project):
        """The default report names the detected stack."""
        result = runner.invoke(app, ["scan", str(project)])

        assert result.exit_code in (0, 1)
        assert "Express.js" in result.stdout
        assert "Static analysis" in result.stdout

    def test_writes_bundle(self, project, tmp_path_factory):
        """--output writes the generated Docker files."""
        output = tmp_path_factory.mktemp("bundle")

        result = runner.invoke(app, ["scan", str(project), "--output", str(output)])

        assert result.exit_code in (0, 1)
        assert (output / "Dockerfile").read_text().startswith("# Generated Dockerfile")
        assert (output / "docker-compose.yml").exists()
        assert (output / ".dockerignore").exists()
        assert (output / "README.md").exists()
        # The scanned project itself is not written to
        assert not (project / "Dockerfile").exists()

    def test_failing_checks_exit_one(self, project):
        """A failing static analysis suite exits with code 1."""
        (project / "src" / "broken.js").write_text("function ( {\n")

        result = runner.invoke(app, ["scan", str(project)])

        assert result.exit_code == 1

    def test_missing_path_is_usage_error(self, tmp_path):
        """A nonexistent project path is rejected."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])

        assert result.exit_code == 2
