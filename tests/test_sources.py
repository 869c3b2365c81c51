"""Tests for content sources and bounded fetching."""

import logging

import pytest

from repodock.exceptions import (
    AccessDeniedError,
    FetchError,
    ListingError,
    NotFoundError,
    RateLimitedError,
)
from repodock.models.analysis import FileEntry
from repodock.sources import ContentSource, LocalDirectorySource, fetch_manifests, fetch_sources
from repodock.sources.fetch import is_manifest


@pytest.fixture
def project(tmp_path):
    """A small checked-out repository."""
    (tmp_path / "package.json").write_text('{"name": "api"}')
    (tmp_path / "README.md").write_text("# api\n")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.js").write_text("const a = 1;\n")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (tmp_path / "node_modules" / "express").mkdir(parents=True)
    (tmp_path / "node_modules" / "express" / "index.js").write_text("module.exports = {};\n")
    return tmp_path


class TestLocalDirectorySource:
    """Test LocalDirectorySource."""

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(LocalDirectorySource(tmp_path), ContentSource)

    @pytest.mark.asyncio
    async def test_list_files(self, project):
        entries = await LocalDirectorySource(project).list_files()

        assert entries == [
            FileEntry(path="src", kind="dir"),
            FileEntry(path="README.md"),
            FileEntry(path="package.json"),
            FileEntry(path="src/index.js"),
        ]

    @pytest.mark.asyncio
    async def test_list_files_missing_root(self, tmp_path):
        with pytest.raises(ListingError):
            await LocalDirectorySource(tmp_path / "nope").list_files()

    @pytest.mark.asyncio
    async def test_list_files_root_is_file(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")

        with pytest.raises(ListingError):
            await LocalDirectorySource(path).list_files()

    @pytest.mark.asyncio
    async def test_get_content(self, project):
        content = await LocalDirectorySource(project).get_content("src/index.js")

        assert content == b"const a = 1;\n"

    @pytest.mark.asyncio
    async def test_get_content_missing(self, project):
        with pytest.raises(NotFoundError) as exc_info:
            await LocalDirectorySource(project).get_content("src/missing.js")

        assert exc_info.value.path == "src/missing.js"

    @pytest.mark.asyncio
    async def test_get_content_directory(self, project):
        with pytest.raises(NotFoundError):
            await LocalDirectorySource(project).get_content("src")

    @pytest.mark.asyncio
    async def test_get_content_outside_root(self, project):
        with pytest.raises(AccessDeniedError):
            await LocalDirectorySource(project / "src").get_content("../package.json")


class TestIsManifest:
    """Test manifest whitelist."""

    @pytest.mark.parametrize(
        "path",
        [
            "package.json",
            "requirements.txt",
            "pom.xml",
            "Cargo.toml",
            "go.mod",
            "composer.json",
            ".gitignore",
            "App.csproj",
            "App.sln",
            "README.md",
            "docs/readme.txt",
            "Dockerfile",
            "Dockerfile.dev",
            "docker-compose.yml",
        ],
    )
    def test_manifests(self, path):
        assert is_manifest(FileEntry(path=path))

    @pytest.mark.parametrize("path", ["src/index.js", "setup.cfg", "package-lock.json"])
    def test_non_manifests(self, path):
        assert not is_manifest(FileEntry(path=path))


class TestFetchManifests:
    """Test fetch_manifests."""

    @pytest.mark.asyncio
    async def test_fetches_only_manifests(self, mock_source, make_entries):
        mock_source.get_content.return_value = b"{}"
        files = make_entries("src/", "src/index.js", "package.json", "README.md")

        contents = await fetch_manifests(mock_source, files)

        assert contents == {"package.json": "{}", "README.md": "{}"}
        fetched = [call.args[0] for call in mock_source.get_content.await_args_list]
        assert fetched == ["package.json", "README.md"]

    @pytest.mark.asyncio
    async def test_root_files_first_within_limit(self, mock_source, make_entries):
        mock_source.get_content.return_value = b"{}"
        files = make_entries("packages/a/package.json", "packages/b/package.json", "package.json")

        contents = await fetch_manifests(mock_source, files, limit=2)

        assert list(contents) == ["package.json", "packages/a/package.json"]

    @pytest.mark.asyncio
    async def test_default_limit_from_settings(self, mock_source, make_entries, monkeypatch):
        monkeypatch.setenv("REPODOCK_MANIFEST_FETCH_LIMIT", "1")
        mock_source.get_content.return_value = b""

        contents = await fetch_manifests(mock_source, make_entries("package.json", "README.md"))

        assert list(contents) == ["package.json"]

    @pytest.mark.asyncio
    async def test_failed_fetch_is_skipped(self, mock_source, make_entries, caplog):
        async def get_content(path):
            if path == "package.json":
                raise RateLimitedError(path, "retry later")
            return b"# api"

        mock_source.get_content.side_effect = get_content

        with caplog.at_level(logging.WARNING, logger="repodock.sources.fetch"):
            contents = await fetch_manifests(mock_source, make_entries("package.json", "README.md"))

        assert contents == {"README.md": "# api"}
        assert "Skipping package.json" in caplog.text

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_source, make_entries):
        mock_source.get_content.side_effect = RuntimeError("disk on fire")

        with pytest.raises(RuntimeError):
            await fetch_manifests(mock_source, make_entries("package.json"))

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_replaced(self, mock_source, make_entries):
        mock_source.get_content.return_value = b"name: caf\xe9"

        contents = await fetch_manifests(mock_source, make_entries("README.md"))

        assert contents["README.md"] == "name: caf\ufffd"


class TestFetchSources:
    """Test fetch_sources."""

    @pytest.mark.asyncio
    async def test_skips_already_fetched(self, mock_source, make_entries):
        mock_source.get_content.return_value = b"x"
        files = make_entries("package.json", "src/", "src/index.js", "src/app.py", "logo.png")

        contents = await fetch_sources(mock_source, files, skip=["package.json"])

        assert list(contents) == ["src/index.js", "src/app.py"]

    @pytest.mark.asyncio
    async def test_limit(self, mock_source, make_entries):
        mock_source.get_content.return_value = b"x"
        files = make_entries("a.js", "b.js", "c.js")

        contents = await fetch_sources(mock_source, files, limit=2)

        assert list(contents) == ["a.js", "b.js"]

    @pytest.mark.asyncio
    async def test_local_directory(self, project):
        source = LocalDirectorySource(project)
        files = await source.list_files()

        manifests = await fetch_manifests(source, files)
        sources = await fetch_sources(source, files, skip=manifests)

        assert manifests == {"README.md": "# api\n", "package.json": '{"name": "api"}'}
        assert sources == {"src/index.js": "const a = 1;\n"}


def test_fetch_errors_share_base():
    assert issubclass(NotFoundError, FetchError)
    assert str(AccessDeniedError("a.txt", "outside repository root")) == (
        "Failed to fetch a.txt: outside repository root"
    )
