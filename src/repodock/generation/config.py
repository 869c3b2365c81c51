"""Docker build configuration resolved from a stack analysis.

Port and start command use the same precedence: an explicit package script,
then the framework convention, then the language default.
"""

import re

from repodock.models.analysis import StackAnalysis
from repodock.models.generation import DockerConfig

DEFAULT_BASE_IMAGE = "node:18-alpine"
DEFAULT_PORT = 3000
DEFAULT_START_COMMAND = "npm start"

BASE_IMAGES: dict[str, str] = {
    "javascript": "node:18-alpine",
    "typescript": "node:18-alpine",
    "python": "python:3.11-alpine",
    "java": "openjdk:17-jdk-alpine",
    "go": "golang:1.21-alpine",
    "rust": "rust:1.70-slim",
    "php": "php:8.2-fpm-alpine",
    "ruby": "ruby:3.2-alpine",
}

# (language, framework) overrides
FRAMEWORK_BASE_IMAGES: dict[tuple[str, str], str] = {
    ("python", "Django"): "python:3.11-slim",
    ("python", "Flask"): "python:3.11-slim",
    ("java", "Spring Boot"): "openjdk:17-jdk-slim",
}

FRAMEWORK_PORTS: dict[str, int] = {
    "Next.js": 3000,
    "Django": 8000,
    "Flask": 5000,
    "FastAPI": 8000,
    "Spring Boot": 8080,
    "Express.js": 3000,
}

LANGUAGE_PORTS: dict[str, int] = {
    "javascript": 3000,
    "typescript": 3000,
    "python": 8000,
    "java": 8080,
    "go": 8080,
    "rust": 8000,
    "php": 80,
    "ruby": 3000,
}

# First script present wins
SCRIPT_COMMANDS: tuple[tuple[str, str], ...] = (
    ("start", "npm start"),
    ("dev", "npm run dev"),
    ("serve", "npm run serve"),
)

FRAMEWORK_COMMANDS: dict[str, str] = {
    "Next.js": "npm start",
    "Django": "python manage.py runserver 0.0.0.0:8000",
    "Flask": "python app.py",
    "FastAPI": "uvicorn main:app --host 0.0.0.0 --port 8000",
    "Spring Boot": "java -jar target/*.jar",
}

LANGUAGE_COMMANDS: dict[str, str] = {
    "javascript": "node index.js",
    "typescript": "node index.js",
    "python": "python main.py",
    "java": "java -jar app.jar",
    "go": "./main",
    "rust": "./target/release/app",
}

COPY_INSTRUCTIONS: dict[str, list[str]] = {
    "javascript": ["COPY package*.json ./", "COPY . ."],
    "typescript": ["COPY package*.json ./", "COPY . ."],
    "python": ["COPY requirements.txt .", "COPY . ."],
    "java": ["COPY pom.xml .", "COPY src ./src"],
    "go": ["COPY go.mod go.sum ./", "COPY . ."],
    "rust": ["COPY Cargo.toml Cargo.lock ./", "COPY src ./src"],
}

RUN_INSTRUCTIONS: dict[str, list[str]] = {
    "javascript": ["RUN npm ci --only=production"],
    "typescript": ["RUN npm ci --only=production"],
    "python": ["RUN pip install --no-cache-dir -r requirements.txt"],
    "java": ["RUN mvn clean package -DskipTests"],
    "go": ["RUN go mod download", "RUN go build -o main ."],
    "rust": ["RUN cargo build --release"],
}


def resolve_base_image(analysis: StackAnalysis) -> str:
    language = analysis.primary_language
    if analysis.framework:
        override = FRAMEWORK_BASE_IMAGES.get((language, analysis.framework))
        if override:
            return override
    return BASE_IMAGES.get(language, DEFAULT_BASE_IMAGE)


_SCRIPT_PORT = re.compile(r"(?:--port[= ]|-p\s+|\bPORT=)(\d{2,5})\b")


def _selected_script(analysis: StackAnalysis) -> str | None:
    """Body of the script the start command would run."""
    for script, _ in SCRIPT_COMMANDS:
        if script in analysis.scripts:
            return analysis.scripts[script]
    return None


def resolve_port(analysis: StackAnalysis) -> int:
    script = _selected_script(analysis)
    if script:
        match = _SCRIPT_PORT.search(script)
        if match:
            return int(match.group(1))
    if analysis.framework == "React" and analysis.build_tool == "Vite":
        return 5173
    if analysis.framework in FRAMEWORK_PORTS:
        return FRAMEWORK_PORTS[analysis.framework]
    return LANGUAGE_PORTS.get(analysis.primary_language, DEFAULT_PORT)


def resolve_start_command(analysis: StackAnalysis) -> str:
    for script, command in SCRIPT_COMMANDS:
        if script in analysis.scripts:
            return command
    if analysis.framework in FRAMEWORK_COMMANDS:
        return FRAMEWORK_COMMANDS[analysis.framework]
    return LANGUAGE_COMMANDS.get(analysis.primary_language, DEFAULT_START_COMMAND)


def resolve_run_instructions(analysis: StackAnalysis) -> list[str]:
    instructions = list(
        RUN_INSTRUCTIONS.get(
            analysis.primary_language, ['RUN echo "No specific build instructions"']
        )
    )
    if analysis.is_node and analysis.framework == "Next.js":
        instructions.append("RUN npm run build")
    return instructions


def resolve_environment(analysis: StackAnalysis) -> dict[str, str]:
    env = {"NODE_ENV": "production"}
    if analysis.framework == "Next.js":
        env["NEXT_TELEMETRY_DISABLED"] = "1"
    if analysis.primary_language == "python":
        env["PYTHONUNBUFFERED"] = "1"
        env["PYTHONDONTWRITEBYTECODE"] = "1"
    return env


def build_docker_config(analysis: StackAnalysis) -> DockerConfig:
    """Resolve the Docker build configuration for a stack."""
    return DockerConfig(
        base_image=resolve_base_image(analysis),
        workdir="/app",
        copy_instructions=list(COPY_INSTRUCTIONS.get(analysis.primary_language, ["COPY . ."])),
        run_instructions=resolve_run_instructions(analysis),
        expose_port=resolve_port(analysis),
        start_command=resolve_start_command(analysis),
        environment_vars=resolve_environment(analysis),
    )
