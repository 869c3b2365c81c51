"""Shared test fixtures."""

import json
import os
from types import MappingProxyType
from unittest.mock import AsyncMock, MagicMock

import pytest

from repodock.models.analysis import Dependency, FileEntry, StackAnalysis
from repodock.settings import get_settings
from repodock.workflows.state import PipelineState, Severity


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from REPODOCK_* environment variables and cached settings."""
    for key in list(os.environ):
        if key.startswith("REPODOCK_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _entries(*paths: str) -> list[FileEntry]:
    return [
        FileEntry(path=p.rstrip("/"), kind="dir") if p.endswith("/") else FileEntry(path=p)
        for p in paths
    ]


@pytest.fixture
def make_entries():
    """Build file entries; paths ending in / are directories."""
    return _entries


@pytest.fixture
def node_files() -> list[FileEntry]:
    """Listing of a small Express.js project."""
    return _entries(
        "src/",
        "src/index.js",
        "src/routes.js",
        "tests/",
        "tests/app.test.js",
        "package.json",
        "package-lock.json",
        "README.md",
        ".gitignore",
    )


@pytest.fixture
def node_package_json() -> str:
    return json.dumps(
        {
            "name": "api",
            "scripts": {"start": "node src/index.js", "test": "jest"},
            "dependencies": {"express": "^4.18.0", "pg": "^8.11.0"},
            "devDependencies": {"jest": "^29.0.0", "eslint": "^8.0.0"},
        }
    )


@pytest.fixture
def node_analysis() -> StackAnalysis:
    """Analysis of an Express.js project backed by PostgreSQL."""
    return StackAnalysis(
        primary_language="javascript",
        framework="Express.js",
        package_manager="npm",
        runtime="Node.js",
        database=["PostgreSQL"],
        dependencies=[
            Dependency(name="express", version="^4.18.0", category="framework"),
            Dependency(name="pg", version="^8.11.0"),
        ],
        dev_dependencies=[Dependency(name="jest", version="^29.0.0", type="dev")],
        scripts={"start": "node src/index.js", "test": "jest"},
        test_framework="Jest",
        linting=["ESLint"],
    )


@pytest.fixture
def python_analysis() -> StackAnalysis:
    """Analysis of a Python project without a detected framework."""
    return StackAnalysis(
        primary_language="python",
        package_manager="pip",
        runtime="Python",
        dependencies=[Dependency(name="requests", version="==2.31.0")],
    )


@pytest.fixture
def empty_analysis() -> StackAnalysis:
    return StackAnalysis()


@pytest.fixture
def valid_dockerfile() -> str:
    """Return a valid minimal Dockerfile."""
    return """FROM node:20-slim
WORKDIR /app
COPY package*.json ./
RUN npm ci
COPY . .
EXPOSE 3000
CMD ["npm", "start"]
"""


@pytest.fixture
def valid_compose() -> str:
    """Return a valid docker-compose.yml."""
    return """services:
  app:
    build: .
    ports:
      - "3000:3000"
"""


@pytest.fixture
def snapshot():
    """Read-only project snapshot with a couple of lint findings."""
    return MappingProxyType(
        {
            "src/index.js": "var express = require('express');\nconst app = express();\n",
            "package.json": '{"name": "api"}',
        }
    )


@pytest.fixture
def progress_messages() -> list[tuple[Severity, str]]:
    """Collector for progress callback messages."""
    return []


@pytest.fixture
def mock_progress(progress_messages):
    """Create a progress callback that collects messages."""
    def _progress(severity: Severity, message: str) -> None:
        progress_messages.append((severity, message))
    return _progress


@pytest.fixture
def mock_source():
    """Content source double; tests set list_files/get_content return values."""
    source = MagicMock()
    source.list_files = AsyncMock(return_value=[])
    source.get_content = AsyncMock(return_value=b"")
    return source


@pytest.fixture
def pipeline_state(mock_source, mock_progress) -> PipelineState:
    """Create a PipelineState for testing."""
    return PipelineState(source=mock_source, on_progress=mock_progress)
