"""Null LLM provider for deployments without AI features"""

from second_brain.config import Settings
from second_brain.providers.base import LLMProvider, ProviderError


class NoneLLMProvider(LLMProvider):
    """Null LLM provider that fails every generation request

    Pattern runs still complete: the narrator falls back to its templated
    sentence, and note creation skips summary and tags.
    """

    def __init__(self, settings: Settings):
        """Initialize none provider (no configuration needed)"""
        pass

    def generate(self, prompt: str, **kwargs) -> str:
        raise ProviderError(
            "LLM generation is not available (llm_provider='none'). "
            "Configure gemini, ollama or the fallback provider to enable AI features.",
            provider=self.get_name()
        )

    def is_available(self) -> bool:
        return False

    def get_name(self) -> str:
        return "none"
