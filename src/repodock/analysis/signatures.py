"""Declarative signature tables for stack detection.

Each table is evaluated in the order written. Rules that overwrite a single
field (framework, build tool, test framework) are last-match-wins, so the
position of a rule in its table is its priority.
"""

from collections.abc import Callable
from dataclasses import dataclass

from repodock.models.analysis import Dependency

EXTENSION_LANGUAGES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "java": "java",
    "go": "go",
    "rs": "rust",
    "rb": "ruby",
    "php": "php",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "kt": "kotlin",
    "swift": "swift",
    "scala": "scala",
    "dart": "dart",
    "r": "r",
    "md": "markdown",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "txt": "text",
}

# Buckets that never win the language vote
GENERIC_LANGUAGES = frozenset({"text", "markdown", "json", "yaml"})

LANGUAGE_RUNTIMES: dict[str, str] = {
    "javascript": "Node.js",
    "typescript": "Node.js",
    "python": "Python",
    "java": "JVM",
    "go": "Go",
    "rust": "Rust",
    "php": "PHP",
    "ruby": "Ruby",
}

JS_CATEGORIES: dict[str, str] = {
    "react": "framework",
    "vue": "framework",
    "angular": "framework",
    "express": "framework",
    "fastify": "framework",
    "koa": "framework",
    "webpack": "build",
    "vite": "build",
    "rollup": "build",
    "jest": "testing",
    "mocha": "testing",
    "cypress": "testing",
    "eslint": "linting",
    "prettier": "linting",
    "tailwindcss": "styling",
    "sass": "styling",
    "styled-components": "styling",
    "axios": "http",
    "fetch": "http",
    "request": "http",
    "lodash": "utility",
    "moment": "utility",
    "date-fns": "utility",
}

PYTHON_CATEGORIES: dict[str, str] = {
    "django": "framework",
    "flask": "framework",
    "fastapi": "framework",
    "requests": "http",
    "urllib3": "http",
    "numpy": "data",
    "pandas": "data",
    "matplotlib": "data",
    "pytest": "testing",
    "unittest": "testing",
    "black": "linting",
    "flake8": "linting",
    "pylint": "linting",
}

JAVA_CATEGORIES: dict[str, str] = {
    "spring-boot-starter": "framework",
    "spring-web": "framework",
    "junit": "testing",
    "mockito": "testing",
    "jackson": "serialization",
    "gson": "serialization",
    "hibernate": "orm",
    "jpa": "orm",
}


def categorize(name: str, table: dict[str, str]) -> str:
    """Look up a dependency category, defaulting to library."""
    return table.get(name, "library")


@dataclass(frozen=True)
class Signals:
    """What a signature predicate can look at."""

    dependencies: tuple[Dependency, ...]
    paths: frozenset[str]

    # Names compare case-insensitively; PyPI spells Django and Flask capitalized.
    def has_dep(self, name: str) -> bool:
        return any(d.name.lower() == name.lower() for d in self.dependencies)

    def has_dep_prefix(self, prefix: str) -> bool:
        return any(d.name.lower().startswith(prefix.lower()) for d in self.dependencies)

    def has_dep_containing(self, fragment: str) -> bool:
        return any(fragment.lower() in d.name.lower() for d in self.dependencies)

    def has_root_file(self, name: str) -> bool:
        return name in self.paths

    def has_file(self, name: str) -> bool:
        """Match the file at the root or in any directory."""
        suffix = f"/{name}"
        return any(p == name or p.endswith(suffix) for p in self.paths)


Predicate = Callable[[Signals], bool]


@dataclass(frozen=True)
class Signature:
    """A predicate mapped to a detected value."""

    predicate: Predicate
    value: str


@dataclass(frozen=True)
class SignatureStage:
    """A run of signatures, optionally skipped when a value is already set."""

    signatures: tuple[Signature, ...]
    only_if_unset: bool = False


def dep(name: str) -> Predicate:
    return lambda s: s.has_dep(name)


def dep_prefix(prefix: str) -> Predicate:
    return lambda s: s.has_dep_prefix(prefix)


def dep_containing(fragment: str) -> Predicate:
    return lambda s: s.has_dep_containing(fragment)


def any_file(*names: str) -> Predicate:
    return lambda s: any(s.has_file(n) for n in names)


def any_root_file(*names: str) -> Predicate:
    return lambda s: any(s.has_root_file(n) for n in names)


def both(first: Predicate, second: Predicate) -> Predicate:
    return lambda s: first(s) and second(s)


# Meta-frameworks come after their base framework so they overwrite it.
FRAMEWORK_STAGES: tuple[SignatureStage, ...] = (
    SignatureStage(
        (
            Signature(dep("react"), "React"),
            Signature(both(dep("react"), dep("next")), "Next.js"),
            Signature(both(dep("react"), dep("gatsby")), "Gatsby"),
            Signature(both(dep("react"), any_file("next.config.js", "next.config.ts")), "Next.js"),
            Signature(dep("vue"), "Vue.js"),
            Signature(both(dep("vue"), dep("nuxt")), "Nuxt.js"),
            Signature(both(dep("vue"), any_file("nuxt.config.js", "nuxt.config.ts")), "Nuxt.js"),
            Signature(dep_prefix("@angular/"), "Angular"),
        )
    ),
    # Marker files only count when no dependency identified a framework.
    SignatureStage(
        (
            Signature(any_file("angular.json"), "Angular"),
            Signature(any_file("vue.config.js"), "Vue.js"),
            Signature(any_file("svelte.config.js"), "Svelte"),
        ),
        only_if_unset=True,
    ),
    SignatureStage(
        (
            Signature(dep("express"), "Express.js"),
            Signature(dep("fastify"), "Fastify"),
            Signature(dep("koa"), "Koa.js"),
            Signature(dep("django"), "Django"),
            Signature(dep("flask"), "Flask"),
            Signature(dep("fastapi"), "FastAPI"),
            Signature(dep_containing("spring"), "Spring Boot"),
        )
    ),
)


# First match wins.
PACKAGE_MANAGER_LOCKFILES: tuple[tuple[str, str], ...] = (
    ("package-lock.json", "npm"),
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("requirements.txt", "pip"),
    ("Pipfile", "pipenv"),
    ("poetry.lock", "poetry"),
    ("Cargo.toml", "cargo"),
    ("go.mod", "go mod"),
    ("composer.json", "composer"),
    ("Gemfile", "bundler"),
)

BUILD_TOOL_SIGNATURES: tuple[Signature, ...] = (
    Signature(any_root_file("webpack.config.js"), "Webpack"),
    Signature(any_root_file("vite.config.js", "vite.config.ts"), "Vite"),
    Signature(any_root_file("rollup.config.js"), "Rollup"),
    Signature(any_root_file("gulpfile.js"), "Gulp"),
    Signature(any_root_file("Gruntfile.js"), "Grunt"),
    Signature(any_root_file("esbuild.config.js"), "esbuild"),
    Signature(any_root_file("snowpack.config.js"), "Snowpack"),
)

TEST_FRAMEWORK_SIGNATURES: tuple[Signature, ...] = (
    Signature(dep("jest"), "Jest"),
    Signature(dep("mocha"), "Mocha"),
    Signature(dep("vitest"), "Vitest"),
    Signature(dep("cypress"), "Cypress"),
    Signature(dep("playwright"), "Playwright"),
    Signature(dep("puppeteer"), "Puppeteer"),
    Signature(dep("pytest"), "pytest"),
)

# Appending tables: every match adds an entry.
LINTING_SIGNATURES: tuple[Signature, ...] = (
    Signature(dep("eslint"), "ESLint"),
    Signature(dep("prettier"), "Prettier"),
    Signature(dep("tslint"), "TSLint"),
    Signature(any_root_file(".eslintrc.js", ".eslintrc.json"), "ESLint"),
    Signature(any_root_file(".prettierrc", "prettier.config.js"), "Prettier"),
)

STYLING_SIGNATURES: tuple[Signature, ...] = (
    Signature(dep("tailwindcss"), "Tailwind CSS"),
    Signature(dep("sass"), "Sass"),
    Signature(dep("less"), "Less"),
    Signature(dep("styled-components"), "Styled Components"),
    Signature(any_root_file("tailwind.config.js", "tailwind.config.ts"), "Tailwind CSS"),
)

DATABASE_SIGNATURES: tuple[Signature, ...] = (
    Signature(lambda s: s.has_dep_containing("mongodb") or s.has_dep("mongoose"), "MongoDB"),
    Signature(lambda s: s.has_dep_containing("postgres") or s.has_dep("pg"), "PostgreSQL"),
    Signature(dep_containing("mysql"), "MySQL"),
    Signature(dep_containing("redis"), "Redis"),
    Signature(dep_containing("sqlite"), "SQLite"),
    Signature(dep_containing("firebase"), "Firebase"),
    Signature(dep_containing("supabase"), "Supabase"),
)


def last_match(signatures: tuple[Signature, ...], signals: Signals) -> str | None:
    """Evaluate an overwriting table. Later matches replace earlier ones."""
    result: str | None = None
    for signature in signatures:
        if signature.predicate(signals):
            result = signature.value
    return result


def all_matches(signatures: tuple[Signature, ...], signals: Signals) -> list[str]:
    """Evaluate an appending table."""
    return [s.value for s in signatures if s.predicate(signals)]


def staged_last_match(stages: tuple[SignatureStage, ...], signals: Signals) -> str | None:
    """Evaluate overwriting stages in order, skipping guarded stages once a value is set."""
    result: str | None = None
    for stage in stages:
        if stage.only_if_unset and result is not None:
            continue
        result = last_match(stage.signatures, signals) or result
    return result
