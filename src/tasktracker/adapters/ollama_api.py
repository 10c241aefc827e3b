"""Ollama API adapter - HTTP client for local text generation."""

import logging

import requests

logger = logging.getLogger(__name__)


class OllamaService:
    """
    Ollama HTTP adapter.

    Implements LLMService protocol against a local Ollama server's
    /api/generate endpoint with streaming disabled.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        timeout: float = 60,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        try:
            resp = self._session.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": prompt,
                    "stream": False,
                    "options": {"temperature": 0.2},
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.error(f"Ollama request failed: {e}")
            raise RuntimeError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise RuntimeError(f"Ollama returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or "response" not in data:
            raise RuntimeError(f"Ollama response missing 'response' field: {data}")
        if not isinstance(data["response"], str):
            raise RuntimeError(f"Ollama 'response' field is not text: {data['response']!r}")
        return data["response"]
