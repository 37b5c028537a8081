"""
Ollama Inference Relay

Forwards prompts (and optional base64 images) to the local Ollama server and
returns the generated text. Also lists the models the server has pulled.

Upstream failures (transport, HTTP status, malformed JSON) are logged and raised
as ``UpstreamError``; nothing is retried.
"""
import json
import logging
from typing import List, Dict, Optional

import httpx

from ..config import settings
from ..core.errors import UpstreamError

logger = logging.getLogger("uvicorn.error")


class OllamaClient:
    """Thin async client for the Ollama HTTP API"""

    def __init__(self, base_url: str | None = None, model: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.ollama_api_url).rstrip("/")
        self.model = model or settings.ollama_model
        self.timeout = timeout if timeout is not None else settings.ollama_timeout

    async def generate(
        self,
        prompt: str,
        images: Optional[List[str]] = None,
        model: Optional[str] = None,
        stream: bool = False,
    ) -> str:
        """
        Generate a completion for ``prompt``.

        Parameters:
            prompt: Prompt text
            images: Optional list of base64-encoded images (vision models)
            model: Model name, defaults to the configured one
            stream: Ask Ollama for newline-delimited chunks and join them

        Returns:
            The generated text, stripped of surrounding whitespace
        """
        payload = {"model": model or self.model, "prompt": prompt, "stream": stream}
        if images:
            payload["images"] = images
        url = f"{self.base_url}/generate"

        logger.debug("[ollama] POST %s model=%s prompt_len=%d images=%d stream=%s",
                     url, payload["model"], len(prompt), len(images or []), stream)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if stream:
                    text = await self._read_stream(client, url, payload)
                else:
                    resp = await client.post(url, json=payload)
                    resp.raise_for_status()
                    text = resp.json()["response"]
        except httpx.HTTPStatusError as e:
            logger.error("[ollama] generate failed with HTTP %s: %s", e.response.status_code, e)
            raise UpstreamError(f"Generation server answered {e.response.status_code}", category="PROMPT") from e
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error("[ollama] generate failed: %r", e)
            raise UpstreamError("Could not generate a response right now", category="PROMPT") from e

        result = (text or "").strip()
        logger.debug("[ollama] response_len=%d preview=%r", len(result), result[:100])
        return result

    async def _read_stream(self, client: httpx.AsyncClient, url: str, payload: dict) -> str:
        """Accumulate the ``response`` field of every JSON line until the stream ends."""
        parts: List[str] = []
        async with client.stream("POST", url, json=payload) as resp:
            resp.raise_for_status()
            async for line in resp.aiter_lines():
                if not line.strip():
                    continue
                chunk = json.loads(line)
                if not isinstance(chunk, dict):
                    raise ValueError(f"Unexpected stream chunk: {line[:100]!r}")
                parts.append(chunk.get("response", ""))
                if chunk.get("done"):
                    break
        return "".join(parts)

    async def list_models(self) -> List[Dict]:
        """
        List the models available on the server.

        Returns:
            [{"name", "modified_at", "size", "digest"}, ...]
        """
        url = f"{self.base_url}/tags"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                raw = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("[ollama] tags failed with HTTP %s", e.response.status_code)
            raise UpstreamError("Could not retrieve the model list", category="MODELS") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[ollama] tags failed: %r", e)
            raise UpstreamError("Could not retrieve the model list", category="MODELS") from e

        return [
            {
                "name": m.get("name"),
                "modified_at": m.get("modified_at"),
                "size": m.get("size"),
                "digest": m.get("digest"),
            }
            for m in raw.get("models", [])
        ]


# Global singleton
ollama_client = OllamaClient()
