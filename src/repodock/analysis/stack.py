"""Technology stack inference from a repository listing and its manifests."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from repodock.analysis.manifests import MANIFEST_PARSERS
from repodock.analysis.signatures import (
    BUILD_TOOL_SIGNATURES,
    DATABASE_SIGNATURES,
    EXTENSION_LANGUAGES,
    FRAMEWORK_STAGES,
    GENERIC_LANGUAGES,
    LANGUAGE_RUNTIMES,
    LINTING_SIGNATURES,
    PACKAGE_MANAGER_LOCKFILES,
    STYLING_SIGNATURES,
    TEST_FRAMEWORK_SIGNATURES,
    Signals,
    all_matches,
    last_match,
    staged_last_match,
)
from repodock.models.analysis import Dependency, FileEntry, StackAnalysis

logger = logging.getLogger(__name__)


def detect_primary_language(files: Iterable[FileEntry]) -> str:
    """Vote on the primary language by file extension.

    Ties go to the language seen first. Returns "unknown" when no typed file votes.
    """
    votes: Counter[str] = Counter()
    for entry in files:
        if entry.kind != "file" or "." not in entry.name:
            continue
        ext = entry.name.rsplit(".", 1)[-1].lower()
        if not ext:
            continue
        language = EXTENSION_LANGUAGES.get(ext, ext)
        if language in GENERIC_LANGUAGES:
            continue
        votes[language] += 1

    if not votes:
        return "unknown"
    # Counter preserves insertion order and max() returns the first maximum.
    return max(votes, key=votes.__getitem__)


def detect_package_manager(paths: frozenset[str]) -> str | None:
    """First lockfile or manifest present at the root wins."""
    for filename, manager in PACKAGE_MANAGER_LOCKFILES:
        if filename in paths:
            return manager
    return None


def analyze_stack(
    files: Iterable[FileEntry],
    contents: Mapping[str, str] | None = None,
) -> StackAnalysis:
    """Infer the technology stack of a repository.

    Never raises: malformed manifests are skipped and leave their fields at
    their defaults.

    Args:
        files: Full repository listing.
        contents: Fetched manifest contents keyed by root-relative path.

    Returns:
        Immutable StackAnalysis.
    """
    files = list(files)
    contents = contents or {}

    primary_language = detect_primary_language(files)
    logger.debug("Primary language: %s (%d paths)", primary_language, len(files))

    package_manager: str | None = None
    build_tool: str | None = None
    scripts: dict[str, str] = {}
    dependencies: list[Dependency] = []
    dev_dependencies: list[Dependency] = []

    for filename, parser in MANIFEST_PARSERS:
        content = contents.get(filename)
        if content is None:
            continue
        try:
            info = parser(content)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed %s: %s", filename, e)
            continue
        logger.debug(
            "Parsed %s: %d runtime, %d dev dependencies",
            filename,
            len(info.dependencies),
            len(info.dev_dependencies),
        )
        package_manager = info.package_manager or package_manager
        build_tool = info.build_tool or build_tool
        if info.scripts:
            scripts = info.scripts
        dependencies.extend(info.dependencies)
        dev_dependencies.extend(info.dev_dependencies)

    paths = frozenset(f.path for f in files if f.kind == "file")
    signals = Signals(dependencies=(*dependencies, *dev_dependencies), paths=paths)

    framework = staged_last_match(FRAMEWORK_STAGES, signals)
    build_tool = last_match(BUILD_TOOL_SIGNATURES, signals) or build_tool
    package_manager = detect_package_manager(paths) or package_manager

    analysis = StackAnalysis(
        primary_language=primary_language,
        framework=framework,
        package_manager=package_manager,
        runtime=LANGUAGE_RUNTIMES.get(primary_language),
        database=all_matches(DATABASE_SIGNATURES, signals),
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        scripts=scripts,
        build_tool=build_tool,
        test_framework=last_match(TEST_FRAMEWORK_SIGNATURES, signals),
        linting=all_matches(LINTING_SIGNATURES, signals),
        styling=all_matches(STYLING_SIGNATURES, signals),
    )

    logger.info(
        "Detected %s (%s), package manager %s, %d dependencies",
        analysis.primary_language,
        analysis.framework or "no framework",
        analysis.package_manager or "none",
        len(analysis.dependencies) + len(analysis.dev_dependencies),
    )
    return analysis
