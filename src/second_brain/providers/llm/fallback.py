"""Fallback LLM provider - tries each provider of an ordered chain once"""

import logging

from second_brain.config import Settings
from second_brain.providers.base import LLMProvider, ProviderError
from second_brain.providers.factories import LLMProviderFactory

logger = logging.getLogger(__name__)


class FallbackLLMProvider(LLMProvider):
    """
    Fallback LLM provider over an ordered chain (settings.llm_fallback_chain).

    Each provider is tried once, in order; the first success wins. Providers
    reporting is_available() == False are skipped. Chain members are created
    lazily via the factory to avoid import-time dependencies.
    """

    def __init__(self, settings: Settings, chain: list[str] | None = None):
        self.settings = settings
        self._names = chain if chain is not None else settings.get_fallback_chain()
        if "fallback" in self._names:
            raise ValueError("The fallback chain cannot contain 'fallback'")
        self._providers: dict[str, LLMProvider] = {}

        logger.info(f"LLM fallback configured: {' -> '.join(self._names) or '(empty)'}")

    def _provider(self, name: str) -> LLMProvider:
        """Lazy-load a chain member"""
        if name not in self._providers:
            logger.info(f"Initializing fallback LLM provider: {name}")
            self._providers[name] = LLMProviderFactory.create(self.settings, name=name)
        return self._providers[name]

    @property
    def providers(self) -> list[LLMProvider]:
        return [self._provider(name) for name in self._names]

    def get_name(self) -> str:
        """Get provider name"""
        return f"fallback({'->'.join(self._names)})"

    def get_default_model(self) -> str:
        return self.settings.get_llm_model()

    def is_available(self) -> bool:
        return any(provider.is_available() for provider in self.providers)

    def generate(self, prompt: str, **kwargs) -> str:
        """Generate text from prompt with the first provider that succeeds"""
        errors = []
        for name in self._names:
            try:
                provider = self._provider(name)
            except ValueError as e:
                logger.warning(f"Skipping LLM provider {name}: {e}")
                errors.append(f"{name}: {e}")
                continue

            if not provider.is_available():
                logger.info(f"LLM provider {provider.get_name()} unavailable, skipping")
                errors.append(f"{provider.get_name()}: unavailable")
                continue

            try:
                return provider.generate(prompt, **kwargs)
            except ProviderError as e:
                logger.warning(f"LLM provider {provider.get_name()} failed: {e}, trying next")
                errors.append(str(e))

        raise ProviderError(
            "All LLM providers failed: " + ("; ".join(errors) or "no providers configured"),
            provider=self.get_name()
        )
