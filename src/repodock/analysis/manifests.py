"""Per-ecosystem manifest parsers.

Each parser takes raw manifest text and returns a ManifestInfo. Parsers may
raise on malformed input; the caller isolates failures per manifest.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from repodock.analysis.signatures import (
    JAVA_CATEGORIES,
    JS_CATEGORIES,
    PYTHON_CATEGORIES,
    categorize,
)
from repodock.models.analysis import Dependency, DependencyType


@dataclass
class ManifestInfo:
    """What a single manifest contributed to the analysis."""

    package_manager: str | None = None
    build_tool: str | None = None
    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: list[Dependency] = field(default_factory=list)
    dev_dependencies: list[Dependency] = field(default_factory=list)


def _js_dependencies(section: object, dep_type: DependencyType) -> list[Dependency]:
    if not isinstance(section, dict):
        return []
    return [
        Dependency(
            name=name,
            version=str(version) if version is not None else None,
            type=dep_type,
            category=categorize(name, JS_CATEGORIES),
        )
        for name, version in section.items()
    ]


def parse_package_json(content: str) -> ManifestInfo:
    """Parse package.json. Peer dependencies are listed with the dev group."""
    pkg = json.loads(content)
    if not isinstance(pkg, dict):
        raise ValueError("package.json root is not an object")

    scripts = pkg.get("scripts") or {}
    if not isinstance(scripts, dict):
        scripts = {}

    return ManifestInfo(
        package_manager="npm",
        scripts={str(k): str(v) for k, v in scripts.items()},
        dependencies=_js_dependencies(pkg.get("dependencies"), "runtime"),
        dev_dependencies=[
            *_js_dependencies(pkg.get("devDependencies"), "dev"),
            *_js_dependencies(pkg.get("peerDependencies"), "peer"),
        ],
    )


_REQUIREMENT_PATTERN = re.compile(r"^([^>=<~!\[;\s]+)(\[[^\]]*\])?\s*([>=<~!][^;#]*)?")


def parse_requirements_txt(content: str) -> ManifestInfo:
    """Parse requirements.txt line by line."""
    deps: list[Dependency] = []
    for raw in content.splitlines():
        line = raw.strip()
        # Skip blanks, comments and pip options (-r, -e, --index-url, ...)
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        match = _REQUIREMENT_PATTERN.match(line)
        if not match:
            continue
        name = match.group(1).strip()
        version = match.group(3).strip() if match.group(3) else None
        deps.append(
            Dependency(
                name=name,
                version=version,
                category=categorize(name.lower(), PYTHON_CATEGORIES),
            )
        )
    return ManifestInfo(package_manager="pip", dependencies=deps)


_POM_DEPENDENCY = re.compile(r"<dependency>(.*?)</dependency>", re.DOTALL)
_POM_TAG = {
    tag: re.compile(rf"<{tag}>\s*(.*?)\s*</{tag}>", re.DOTALL)
    for tag in ("groupId", "artifactId", "version", "scope")
}


def parse_pom_xml(content: str) -> ManifestInfo:
    """Scrape <dependency> blocks from pom.xml. Test-scoped ones are dev dependencies."""
    info = ManifestInfo(package_manager="maven", build_tool="maven")
    for block in _POM_DEPENDENCY.findall(content):
        group = _POM_TAG["groupId"].search(block)
        artifact = _POM_TAG["artifactId"].search(block)
        if not group or not artifact:
            continue
        version = _POM_TAG["version"].search(block)
        scope = _POM_TAG["scope"].search(block)
        is_test = scope is not None and scope.group(1) == "test"
        dependency = Dependency(
            name=f"{group.group(1)}:{artifact.group(1)}",
            version=version.group(1) if version else None,
            type="dev" if is_test else "runtime",
            category=categorize(artifact.group(1), JAVA_CATEGORIES),
        )
        (info.dev_dependencies if is_test else info.dependencies).append(dependency)
    return info


_INLINE_VERSION = re.compile(r"""version\s*=\s*["']([^"']+)["']""")


def _cargo_version(value: str) -> str | None:
    value = value.strip()
    if value.startswith("{"):
        match = _INLINE_VERSION.search(value)
        return match.group(1) if match else None
    return value.strip("\"'") or None


def parse_cargo_toml(content: str) -> ManifestInfo:
    """Scan [dependencies] and [dev-dependencies] key = value lines."""
    info = ManifestInfo(package_manager="cargo", build_tool="cargo")
    section: str | None = None
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            section = line
            continue
        if section not in ("[dependencies]", "[dev-dependencies]") or "=" not in line:
            continue
        name, _, value = line.partition("=")
        is_dev = section == "[dev-dependencies]"
        dependency = Dependency(
            name=name.strip().strip("\"'"),
            version=_cargo_version(value),
            type="dev" if is_dev else "runtime",
        )
        (info.dev_dependencies if is_dev else info.dependencies).append(dependency)
    return info


_GO_REQUIRE = re.compile(r"^require\s+(\S+)\s+(\S+)")
_GO_BLOCK_ENTRY = re.compile(r"^(\S+)\s+(\S+)")


def parse_go_mod(content: str) -> ManifestInfo:
    """Read single-line and block-form require directives."""
    info = ManifestInfo(package_manager="go mod", build_tool="go")
    in_block = False
    for raw in content.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue
        if in_block:
            if line == ")":
                in_block = False
                continue
            match = _GO_BLOCK_ENTRY.match(line)
        elif line.startswith("require ("):
            in_block = True
            continue
        else:
            match = _GO_REQUIRE.match(line)
        if match:
            info.dependencies.append(Dependency(name=match.group(1), version=match.group(2)))
    return info


# Evaluated in this order; later manifests overwrite package manager and build tool.
MANIFEST_PARSERS: tuple[tuple[str, Callable[[str], ManifestInfo]], ...] = (
    ("package.json", parse_package_json),
    ("requirements.txt", parse_requirements_txt),
    ("pom.xml", parse_pom_xml),
    ("Cargo.toml", parse_cargo_toml),
    ("go.mod", parse_go_mod),
)
