"""Hugging Face inference adapter.

Calls the hosted text-generation task:

    POST {base_url}/{model_id}
    {"inputs": "...", "parameters": {"max_new_tokens": ..., ...}}

The response is usually ``[{"generated_text": "..."}]``. Most models return
the prompt followed by the continuation, so callers should expect echoes.
"""

from __future__ import annotations

from typing import Any

import httpx

from studyplan.config import get_settings
from studyplan.schemas import GenerationParams
from studyplan.llm.base import ProviderError, TextGenerationAdapter


class HuggingFaceAdapter(TextGenerationAdapter):
    """Hugging Face text-generation inference adapter."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.hf_api_key
        self.base_url = base_url if base_url is not None else settings.hf_base_url
        self.timeout = timeout or settings.provider_timeout_seconds

        if not self.api_key:
            raise ProviderError("Hugging Face API key not configured")

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
        return "huggingface"

    async def generate(self, model: str, prompt: str, params: GenerationParams) -> str | None:
        """Send a text-generation request for one model."""
        payload = {
            "inputs": prompt,
            "parameters": self._build_parameters(params),
        }

        try:
            response = await self._client.post(f"/{model}", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(f"{model} returned HTTP {status}: {_error_detail(e.response)}", status) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"{model} request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{model} returned invalid JSON: {e}") from e

        return _extract_generated_text(data)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.text[:200]


def _extract_generated_text(data: Any) -> str | None:
    if isinstance(data, list):
        data = data[0] if data else None
    if isinstance(data, dict):
        text = data.get("generated_text")
        return text if isinstance(text, str) else None
    return None
