"""Tests for stack analysis."""

import json

import pytest
from pydantic import ValidationError

from repodock.analysis import analyze_stack, detect_primary_language
from repodock.models.analysis import FileEntry


class TestDetectPrimaryLanguage:
    """Test extension voting."""

    def test_empty_listing_is_unknown(self):
        """No files means unknown."""
        assert detect_primary_language([]) == "unknown"

    def test_generic_files_do_not_vote(self, make_entries):
        """Markdown, JSON, YAML and text never win."""
        files = make_entries("README.md", "package.json", "ci.yml", "notes.txt", "a.yaml")
        assert detect_primary_language(files) == "unknown"

    def test_majority_wins(self, make_entries):
        """Most frequent language wins."""
        files = make_entries("a.py", "b.py", "c.js")
        assert detect_primary_language(files) == "python"

    def test_tie_goes_to_first_seen(self, make_entries):
        """Ties resolve to the language observed first."""
        assert detect_primary_language(make_entries("a.ts", "b.py")) == "typescript"
        assert detect_primary_language(make_entries("b.py", "a.ts")) == "python"

    def test_directories_and_dotless_files_ignored(self, make_entries):
        """Only files with an extension vote."""
        files = make_entries("src.py/", "Makefile", "main.go")
        assert detect_primary_language(files) == "go"

    def test_unknown_extension_votes_as_itself(self, make_entries):
        """Unmapped extensions vote under their own name."""
        assert detect_primary_language(make_entries("mod.ex", "app.ex")) == "ex"

    def test_jsx_and_tsx_map_to_base_language(self, make_entries):
        """JSX counts as JavaScript and TSX as TypeScript."""
        assert detect_primary_language(make_entries("App.jsx")) == "javascript"
        assert detect_primary_language(make_entries("App.tsx")) == "typescript"


class TestAnalyzeStack:
    """Test full stack inference."""

    def test_empty_input(self):
        """Empty input yields defaults without raising."""
        analysis = analyze_stack([])
        assert analysis.primary_language == "unknown"
        assert analysis.framework is None
        assert analysis.dependencies == ()
        assert analysis.database == ()
        assert analysis.linting == ()

    def test_next_js_detected(self, make_entries):
        """react + next dependencies resolve to Next.js."""
        content = json.dumps({"dependencies": {"react": "^18.0.0", "next": "^13.0.0"}})
        files = make_entries("package.json", "pages/index.js")
        analysis = analyze_stack(files, {"package.json": content})
        assert analysis.framework == "Next.js"
        assert analysis.package_manager == "npm"
        assert analysis.runtime == "Node.js"

    def test_next_requires_react(self, make_entries):
        """next without react does not produce Next.js."""
        content = json.dumps({"dependencies": {"next": "^13.0.0"}})
        analysis = analyze_stack(make_entries("package.json"), {"package.json": content})
        assert analysis.framework is None

    def test_next_config_file_marks_next(self, make_entries):
        """A next.config.js alongside react means Next.js."""
        content = json.dumps({"dependencies": {"react": "^18.0.0"}})
        files = make_entries("package.json", "next.config.js")
        analysis = analyze_stack(files, {"package.json": content})
        assert analysis.framework == "Next.js"

    def test_server_framework_overrides_frontend(self, make_entries):
        """Later rules overwrite earlier ones."""
        content = json.dumps({"dependencies": {"react": "18", "express": "4"}})
        analysis = analyze_stack(make_entries("package.json"), {"package.json": content})
        assert analysis.framework == "Express.js"

    def test_marker_file_only_when_unset(self, make_entries):
        """svelte.config.js is ignored once a dependency identified a framework."""
        vue = json.dumps({"dependencies": {"vue": "3"}})
        files = make_entries("package.json", "svelte.config.js")
        assert analyze_stack(files, {"package.json": vue}).framework == "Vue.js"
        assert analyze_stack(files, {}).framework == "Svelte"

    def test_later_marker_files_overwrite(self, make_entries):
        """Within the marker block, later markers win."""
        files = make_entries("angular.json", "vue.config.js")
        assert analyze_stack(files).framework == "Vue.js"

    def test_lockfile_overrides_manifest_package_manager(self, make_entries):
        """yarn.lock beats the npm default from package.json."""
        content = json.dumps({"dependencies": {}})
        files = make_entries("package.json", "yarn.lock")
        assert analyze_stack(files, {"package.json": content}).package_manager == "yarn"

    def test_malformed_manifest_is_skipped(self, make_entries, caplog):
        """Bad JSON leaves defaults and logs a warning."""
        files = make_entries("package.json", "index.js")
        analysis = analyze_stack(files, {"package.json": "{not json"})
        assert analysis.primary_language == "javascript"
        assert analysis.dependencies == ()
        assert analysis.package_manager is None
        assert "package.json" in caplog.text

    def test_python_project(self, make_entries):
        """requirements.txt drives pip and Django detection."""
        files = make_entries("manage.py", "app/views.py", "requirements.txt")
        analysis = analyze_stack(
            files, {"requirements.txt": "flask==2.3\nredis>=5.0\npytest\n"}
        )
        assert analysis.primary_language == "python"
        assert analysis.package_manager == "pip"
        assert analysis.runtime == "Python"
        assert analysis.framework == "Flask"
        assert analysis.test_framework == "pytest"
        assert analysis.database == ("Redis",)

    def test_lowercase_django(self, make_entries):
        """django dependency resolves to Django."""
        analysis = analyze_stack(make_entries("requirements.txt"), {"requirements.txt": "django\n"})
        assert analysis.framework == "Django"

    @pytest.mark.parametrize(
        ("requirements", "framework"),
        [("Django==4.2\n", "Django"), ("Flask==3.0\n", "Flask"), ("FastAPI>=0.110\n", "FastAPI")],
    )
    def test_python_names_match_any_case(self, make_entries, requirements, framework):
        """PyPI capitalization does not hide the framework."""
        analysis = analyze_stack(
            make_entries("requirements.txt"), {"requirements.txt": requirements}
        )
        assert analysis.framework == framework

    def test_spring_boot_from_pom(self, make_entries):
        """Any dependency containing spring means Spring Boot."""
        pom = """<project><dependencies>
            <dependency>
                <groupId>org.springframework.boot</groupId>
                <artifactId>spring-boot-starter-web</artifactId>
            </dependency>
        </dependencies></project>"""
        files = make_entries("pom.xml", "src/Main.java", "src/App.java")
        analysis = analyze_stack(files, {"pom.xml": pom})
        assert analysis.framework == "Spring Boot"
        assert analysis.build_tool == "maven"
        assert analysis.runtime == "JVM"

    def test_root_vite_config(self, make_entries):
        """A root vite config sets the build tool."""
        files = make_entries("vite.config.ts", "src/main.ts")
        assert analyze_stack(files).build_tool == "Vite"

    def test_build_tool_last_match(self, make_entries):
        """Later build tool rules win."""
        files = make_entries("webpack.config.js", "gulpfile.js")
        assert analyze_stack(files).build_tool == "Gulp"

    def test_nested_build_config_ignored(self, make_entries):
        """Build tool configs only count at the root."""
        assert analyze_stack(make_entries("docs/webpack.config.js")).build_tool is None

    def test_linting_keeps_duplicates(self, make_entries):
        """eslint dependency and .eslintrc.json both append ESLint."""
        content = json.dumps({"devDependencies": {"eslint": "8"}})
        files = make_entries("package.json", ".eslintrc.json")
        analysis = analyze_stack(files, {"package.json": content})
        assert analysis.linting == ("ESLint", "ESLint")

    def test_databases_in_table_order(self, make_entries):
        """Databases follow table order, each once."""
        content = json.dumps(
            {"dependencies": {"redis": "4", "mongoose": "7", "mongodb": "5", "pg": "8"}}
        )
        analysis = analyze_stack(make_entries("package.json"), {"package.json": content})
        assert analysis.database == ("MongoDB", "PostgreSQL", "Redis")

    def test_analysis_is_frozen(self):
        """StackAnalysis cannot be mutated."""
        analysis = analyze_stack([FileEntry(path="a.py")])
        with pytest.raises(ValidationError):
            analysis.framework = "Flask"

    def test_analysis_collections_are_immutable(self, make_entries):
        """List-like fields are tuples, so they cannot be appended to."""
        analysis = analyze_stack(
            make_entries("requirements.txt"), {"requirements.txt": "flask\nredis\n"}
        )
        assert analysis.database == ("Redis",)
        assert isinstance(analysis.dependencies, tuple)
        with pytest.raises(AttributeError):
            analysis.dependencies.append(analysis.dependencies[0])

    def test_scripts_captured(self, make_entries, node_package_json):
        """package.json scripts are kept by name."""
        analysis = analyze_stack(make_entries("package.json"), {"package.json": node_package_json})
        assert analysis.scripts["start"] == "node src/index.js"
        assert analysis.test_framework == "Jest"
        assert [d.name for d in analysis.dev_dependencies] == ["jest", "eslint"]
