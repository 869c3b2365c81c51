"""Enrichment clients.

Two implementations of the EnrichmentClient protocol: an HTTP client for an
Ollama-compatible service and a pydantic-ai agent backed by the configured
cloud providers. Both raise EnrichmentError when no usable text comes back.
"""

import logging
from typing import Protocol, runtime_checkable

import httpx
from pydantic_ai import Agent

from repodock.exceptions import EnrichmentError
from repodock.settings import NoAPIKeyError, get_fallback_model, get_settings

logger = logging.getLogger(__name__)


@runtime_checkable
class EnrichmentClient(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str) -> str: ...


class HttpEnrichmentClient:
    """Client for an Ollama-style `/api/generate` endpoint."""

    def __init__(
        self,
        base_url: str,
        model: str | None = None,
        timeout: float | None = None,
        status_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = base_url.rstrip("/")
        self.model = model or settings.enrichment_model
        self.timeout = timeout if timeout is not None else settings.enrichment_timeout
        self.status_timeout = (
            status_timeout if status_timeout is not None else settings.enrichment_status_timeout
        )
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self._transport)

    async def is_available(self) -> bool:
        """Probe the service model listing. Never raises."""
        try:
            async with self._client(self.status_timeout) as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Enrichment service at %s unavailable: %s", self.base_url, e)
            return False
        return True

    async def generate(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": 0.1},
        }
        try:
            async with self._client(self.timeout) as client:
                response = await client.post("/api/generate", json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.TimeoutException as e:
            raise EnrichmentError(f"Enrichment request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise EnrichmentError(
                f"Enrichment service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise EnrichmentError(f"Enrichment service unreachable: {e}") from e
        except ValueError as e:
            raise EnrichmentError("Enrichment service returned a non-JSON body") from e

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise EnrichmentError("Enrichment service returned an empty response")
        return text


SYSTEM_PROMPT = """\
<task>
You are a containerization expert. Given a summary of a software project, you
produce production-ready Docker configuration.
</task>

<rules>
- Respond with a single JSON object and nothing else.
- Prefer minimal, pinned base images and multi-stage builds.
- Run the application as a non-root user.
- Keep the port and start command from the baseline unless they are clearly wrong.
</rules>
"""

agent = Agent(
    output_type=str,
    system_prompt=SYSTEM_PROMPT,
    defer_model_check=True,
)


class AgentEnrichmentClient:
    """Enrichment through a pydantic-ai agent on the configured providers."""

    async def generate(self, prompt: str) -> str:
        try:
            model = get_fallback_model()
        except NoAPIKeyError as e:
            raise EnrichmentError(str(e)) from e
        try:
            result = await agent.run(prompt, model=model)
        except Exception as e:
            raise EnrichmentError(f"Enrichment agent failed: {e}") from e
        return result.output
