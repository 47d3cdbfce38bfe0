"""Provider client: one generation call against one named model.

Provider ids:
- ``chat:<model>``  -> OpenAI-compatible chat completions adapter
- anything else     -> Hugging Face model id on the inference endpoint

No retries and no fallback here; ordering and fallback belong to the
generation workflow.
"""

from __future__ import annotations

import logging

from studyplan.config import Settings, get_settings
from studyplan.schemas import GenerationParams
from studyplan.llm.base import TextGenerationAdapter
from studyplan.llm.chat import ChatCompletionAdapter
from studyplan.llm.huggingface import HuggingFaceAdapter


logger = logging.getLogger(__name__)

CHAT_PREFIX = "chat:"
PROBE_INPUT = "Hello"
PROBE_PARAMS = GenerationParams(max_new_tokens=5)


def resolve_provider(provider_id: str) -> tuple[str, str]:
    """Split a provider id into (adapter kind, model name)."""
    if provider_id.startswith(CHAT_PREFIX):
        return ("chat", provider_id[len(CHAT_PREFIX):])
    return ("huggingface", provider_id)


class ProviderClient:
    """Dispatches generation calls to the adapter for each provider id."""

    def __init__(
        self,
        settings: Settings | None = None,
        adapters: dict[str, TextGenerationAdapter] | None = None,
    ):
        self._settings = settings or get_settings()

        # Initialize adapters lazily
        self._adapters: dict[str, TextGenerationAdapter] = dict(adapters or {})

    def _get_adapter(self, kind: str) -> TextGenerationAdapter:
        """Get or create the adapter for a provider kind."""
        if kind not in self._adapters:
            timeout = self._settings.provider_timeout_seconds
            if kind == "huggingface":
                self._adapters[kind] = HuggingFaceAdapter(
                    api_key=self._settings.hf_api_key,
                    base_url=self._settings.hf_base_url,
                    timeout=timeout,
                )
            elif kind == "chat":
                self._adapters[kind] = ChatCompletionAdapter(
                    api_key=self._settings.chat_api_key,
                    base_url=self._settings.chat_base_url,
                    timeout=timeout,
                )
            else:
                raise ValueError(f"Unknown provider kind: {kind}")
        return self._adapters[kind]

    async def attempt(self, provider_id: str, prompt: str, params: GenerationParams) -> str | None:
        """Run one generation call against one provider.

        Returns:
            Generated text, or None when the provider answered without text

        Raises:
            ProviderError: the call failed or the adapter could not be created
        """
        kind, model = resolve_provider(provider_id)
        adapter = self._get_adapter(kind)
        logger.debug(f"Calling {model} via {adapter.provider_name} adapter")
        return await adapter.generate(model, prompt, params)

    async def probe(self, provider_id: str) -> str:
        """Check whether a provider answers a trivial request."""
        try:
            await self.attempt(provider_id, PROBE_INPUT, PROBE_PARAMS)
        except Exception as e:
            logger.info(f"Probe of {provider_id} failed: {e}")
            return f"Unavailable: {e}"
        return "Available"

    async def close(self) -> None:
        """Close all adapters."""
        for adapter in self._adapters.values():
            await adapter.close()
        self._adapters.clear()
