"""Abstract base class for text-generation adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from studyplan.schemas import GenerationParams


class ProviderError(RuntimeError):
    """A remote generation call failed (transport, auth, quota, bad payload)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TextGenerationAdapter(ABC):
    """Abstract base class for model provider adapters.

    All provider kinds (Hugging Face inference, OpenAI-compatible chat
    endpoints) implement this interface so the router can treat them the same.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider kind (e.g., 'huggingface', 'chat')."""
        ...

    @abstractmethod
    async def generate(self, model: str, prompt: str, params: GenerationParams) -> str | None:
        """Run one generation call.

        Args:
            model: Model name understood by this provider
            prompt: Full prompt text
            params: Sampling parameters

        Returns:
            The generated text, or None if the response carried no text

        Raises:
            ProviderError: if the call itself failed
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP client."""
        ...

    def _build_parameters(self, params: GenerationParams) -> dict[str, Any]:
        """Sampling parameters as a payload fragment, unset values dropped."""
        return params.model_dump(exclude_none=True)
