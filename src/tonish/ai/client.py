"""Ollama client for local language-model generation.

Uses urllib.request (stdlib) for the two plain JSON calls the assistant
needs. Calls are blocking and are run off the event loop with
asyncio.to_thread by the async wrappers.
"""

import asyncio
import json
import urllib.error
import urllib.request

from tonish.config import AISettings
from tonish.exceptions import AIServiceError, AIUnavailableError
from tonish.logging import get_logger

logger = get_logger(__name__)

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class OllamaClient:
    """Non-streaming generation against an Ollama server.

    Args:
        settings: Server URL, model name and request timeout.
    """

    def __init__(self, settings: AISettings) -> None:
        self.base_url = settings.url.rstrip("/")
        self.model = settings.model
        self._timeout = settings.timeout_seconds

    def generate_sync(self, prompt: str) -> str:
        """POST the prompt to /api/generate and return the model's text."""
        body = json.dumps({"model": self.model, "prompt": prompt, "stream": False})
        req = urllib.request.Request(
            f"{self.base_url}/api/generate",
            data=body.encode("utf-8"),
            headers=_HEADERS,
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            logger.warning("ollama_generate_http_error", status=e.code, detail=detail[:200])
            raise AIServiceError(
                f"AI processing failed: ollama returned status {e.code}: {detail}"
            ) from e
        except (urllib.error.URLError, OSError) as e:
            logger.warning("ollama_generate_unreachable", url=self.base_url, error=str(e))
            raise AIServiceError(
                f"AI processing failed: failed to send request to Ollama: {e}"
            ) from e

        try:
            data = json.loads(raw)
            text = data["response"]
        except (ValueError, KeyError, TypeError) as e:
            raise AIServiceError(f"AI processing failed: failed to decode response: {e}") from e

        logger.debug("ollama_generate_done", model=self.model, chars=len(text))
        return str(text)

    def health_check_sync(self) -> None:
        """GET /api/tags; raises AIUnavailableError if the server does not answer 200."""
        req = urllib.request.Request(f"{self.base_url}/api/tags", headers=_HEADERS)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                status = resp.status
        except urllib.error.HTTPError as e:
            raise AIUnavailableError(
                f"ollama health check failed with status {e.code}"
            ) from e
        except (urllib.error.URLError, OSError) as e:
            raise AIUnavailableError(f"ollama is not accessible: {e}") from e

        if status != 200:
            raise AIUnavailableError(f"ollama health check failed with status {status}")

    async def generate(self, prompt: str) -> str:
        return await asyncio.to_thread(self.generate_sync, prompt)

    async def health_check(self) -> None:
        await asyncio.to_thread(self.health_check_sync)
