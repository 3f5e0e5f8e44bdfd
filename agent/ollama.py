"""
Ollama text-generation client.

Talks to a local Ollama server over its HTTP API.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_TIMEOUT = 300.0  # local models can be slow to answer


class GenerationError(Exception):
    """Raised when the generation backend fails to produce a completion."""

    pass


class OllamaClient:
    """Async client for the Ollama generate and tags endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def generate(self, prompt: str, model: str) -> str:
        """
        Generate a completion for a prompt.

        Args:
            prompt: Full prompt text
            model: Model name, e.g. "devsharp:latest"

        Returns:
            The completion text

        Raises:
            GenerationError: On HTTP errors or an unexpected response body
        """
        payload = {"model": model, "prompt": prompt, "stream": False}
        try:
            response = await self.client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise GenerationError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise GenerationError(f"Ollama returned invalid JSON: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise GenerationError("Ollama response did not contain generated text")
        return text

    async def list_models(self) -> list[str]:
        """
        List the models installed on the server.

        Returns:
            Model names; empty if the server is unreachable
        """
        try:
            response = await self.client.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not list Ollama models: %s", e)
            return []

        models = data.get("models", []) if isinstance(data, dict) else []
        return [m["name"] for m in models if isinstance(m, dict) and m.get("name")]

    async def is_available(self) -> bool:
        return len(await self.list_models()) > 0
