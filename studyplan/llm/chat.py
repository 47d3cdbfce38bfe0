"""OpenAI-compatible chat completions adapter.

Used for provider ids of the form ``chat:<model>`` (e.g. ``chat:deepseek-chat``).
Any endpoint that speaks the ``/chat/completions`` protocol works; the base URL
and key come from ``chat_base_url`` / ``chat_api_key``.
"""

from __future__ import annotations

from typing import Any

import httpx

from studyplan.config import get_settings
from studyplan.schemas import GenerationParams
from studyplan.llm.base import ProviderError, TextGenerationAdapter


class ChatCompletionAdapter(TextGenerationAdapter):
    """Chat completions adapter; the prompt is sent as a single user message."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.chat_api_key
        self.base_url = base_url if base_url is not None else settings.chat_base_url
        self.timeout = timeout or settings.provider_timeout_seconds

        if not self.api_key:
            raise ProviderError("Chat completions API key not configured")

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "chat"

    def _build_parameters(self, params: GenerationParams) -> dict[str, Any]:
        # Chat endpoints have no repetition_penalty / do_sample equivalents
        mapped: dict[str, Any] = {}
        if params.max_new_tokens is not None:
            mapped["max_tokens"] = params.max_new_tokens
        if params.temperature is not None:
            mapped["temperature"] = params.temperature
        if params.top_p is not None:
            mapped["top_p"] = params.top_p
        return mapped

    async def generate(self, model: str, prompt: str, params: GenerationParams) -> str | None:
        """Send chat completion request."""
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            **self._build_parameters(params),
        }

        try:
            response = await self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(f"{model} returned HTTP {status}: {e.response.text[:200]}", status) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"{model} request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{model} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            return None

        # Parse response
        choices = data.get("choices") or [{}]
        message = choices[0].get("message") or {}
        content = message.get("content")
        return content if isinstance(content, str) else None

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
