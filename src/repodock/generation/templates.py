"""Text templates for the generated Docker bundle."""

from jinja2 import Template

HEALTHCHECK_OPTIONS = "--interval=30s --timeout=10s --start-period=60s --retries=3"

DOCKERFILE = Template(
    """\
# Generated Dockerfile for {{ label }} application
FROM {{ config.base_image }}

WORKDIR {{ config.workdir }}

{% for key, value in config.environment_vars.items() %}
ENV {{ key }}={{ value }}
{% endfor %}

{% for line in config.copy_instructions %}
{{ line }}
{% endfor %}

{% for line in config.run_instructions %}
{{ line }}
{% endfor %}

EXPOSE {{ config.expose_port }}

HEALTHCHECK {{ healthcheck_options }} \\
  CMD curl -f http://localhost:{{ config.expose_port }}/health || exit 1

CMD {{ cmd }}
""",
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

README = Template(
    """\
# Docker Configuration

This Docker configuration was automatically generated for your {{ label }} application.

## Quick Start

### Using Docker
```bash
# Build the image
docker build -t my-app .

# Run the container
docker run -p {{ config.expose_port }}:{{ config.expose_port }} my-app
```

### Using Docker Compose
```bash
# Start all services
docker compose up -d

# View logs
docker compose logs -f

# Stop services
docker compose down
```

## Configuration Details

- **Base Image**: {{ config.base_image }}
- **Exposed Port**: {{ config.expose_port }}
- **Start Command**: {{ config.start_command }}
- **Health Check**: http://localhost:{{ config.expose_port }}/health
- **Framework**: {{ analysis.framework or 'None detected' }}
- **Primary Language**: {{ analysis.primary_language }}

## Environment Variables

{% for key, value in config.environment_vars.items() %}
- `{{ key }}`: {{ value }}
{% endfor %}

## Database Services

{% if analysis.database %}
{% for db in analysis.database %}
- {{ db }}
{% endfor %}
{% else %}
No database services detected
{% endif %}

## Development

For development, you may want to:

1. Mount your source code as a volume
2. Use a different start command for hot reloading
3. Expose additional ports for debugging

Example development docker-compose override:

```yaml
services:
  app:
    volumes:
      - .:/app
    command: {{ dev_command }}
    environment:
      - NODE_ENV=development
```

## Production Considerations

- Use multi-stage builds for smaller images
- Run the container as a non-root user
- Configure proper logging
- Use secrets for sensitive data
- Set resource limits
""",
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

DOCKERIGNORE_COMMON = """\
# Generated .dockerignore
node_modules
npm-debug.log
.git
.gitignore
README.md
.env
.env.local
.env.development.local
.env.test.local
.env.production.local
.DS_Store
*.log
"""

DOCKERIGNORE_LANGUAGE: dict[str, str] = {
    "javascript": """
# Node.js specific
.npm
.nyc_output
coverage
.next
.nuxt
dist
build
""",
    "python": """
# Python specific
__pycache__
*.pyc
*.pyo
*.pyd
.Python
env
venv
.venv
pip-log.txt
pip-delete-this-directory.txt
.tox
.coverage
.coverage.*
.cache
nosetests.xml
coverage.xml
*.cover
.mypy_cache
.pytest_cache
.hypothesis
""",
    "java": """
# Java specific
target/
*.class
*.jar
*.war
*.ear
*.logs
hs_err_pid*
""",
    "go": """
# Go specific
*.exe
*.exe~
*.dll
*.so
*.dylib
*.test
*.out
vendor/
""",
    "rust": """
# Rust specific
target/
""",
}
DOCKERIGNORE_LANGUAGE["typescript"] = DOCKERIGNORE_LANGUAGE["javascript"]

ENRICHMENT_PROMPT = Template(
    """\
Generate optimized Docker configuration for this project:

Primary Language: {{ analysis.primary_language }}
Framework: {{ analysis.framework or 'None' }}
Package Manager: {{ analysis.package_manager or 'None' }}
Build Tool: {{ analysis.build_tool or 'None' }}
Database: {{ analysis.database | join(', ') if analysis.database else 'None' }}

Key Dependencies:
{% for dep in analysis.dependencies[:10] %}
- {{ dep.name }}{% if dep.version %}@{{ dep.version }}{% endif %}

{% else %}
None listed
{% endfor %}

File structure (sample):
{% for path in paths[:20] %}
{{ path }}
{% else %}
Not provided
{% endfor %}

Baseline configuration (keep the port and start command unless they are wrong):
- Base image: {{ config.base_image }}
- Port: {{ config.expose_port }}
- Start command: {{ config.start_command }}

Respond with ONLY a JSON object of this shape:
{
  "dockerfile": "complete Dockerfile content with multi-stage build if beneficial",
  "dockerCompose": "docker-compose.yml with all necessary services",
  "dockerignore": ".dockerignore file content",
  "healthCheck": {
    "endpoint": "/health endpoint path",
    "command": "health check command",
    "interval": "check interval",
    "timeout": "timeout duration",
    "retries": 3
  },
  "readme": "Docker README with instructions",
  "securityRecommendations": ["security best practices"],
  "optimizations": ["performance optimizations applied"],
  "estimatedSize": "estimated final image size",
  "buildTime": "estimated build time"
}

Requirements:
1. Use multi-stage builds for smaller images
2. Implement proper health checks
3. Follow security best practices (non-root user, minimal base image)
4. Optimize for caching and build speed
5. Add proper environment variable handling
6. Include database services if detected
""",
    trim_blocks=True,
    lstrip_blocks=True,
)
