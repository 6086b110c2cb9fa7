"""Provider factories - Factory pattern with entry point discovery

All factories use the plugin_loader to discover providers via entry points.
This provides a unified mechanism for both built-in and external providers.
"""

import logging

from second_brain.config import Settings

from . import plugin_loader
from .base import LLMProvider, NoteStoreProvider, PatternStoreProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM providers

    Providers are discovered via entry points in the 'second_brain.llm' group.

    Built-in providers:
        - gemini: Google Gemini (cloud)
        - ollama: Local Ollama server
        - fallback: Ordered chain of the above
        - none: Always fails (AI features disabled)
    """

    @classmethod
    def create(cls, settings: Settings, name: str | None = None) -> LLMProvider:
        """Create LLM provider based on settings

        Args:
            settings: Application settings with llm_provider configured
            name: Explicit provider name overriding settings.llm_provider

        Returns:
            LLM provider instance

        Raises:
            ValueError: If provider not found or dependencies missing
        """
        provider_name = name or settings.llm_provider
        provider_class = plugin_loader.get_provider_class('llm', provider_name)

        if not provider_class:
            available = ', '.join(cls.get_available_providers())
            raise ValueError(
                f"Unknown LLM provider: {provider_name}. "
                f"Available: {available or 'none (check dependencies)'}"
            )

        logger.info(f"Creating LLM provider: {provider_name}")
        return provider_class(settings)

    @classmethod
    def get_available_providers(cls) -> list[str]:
        """Get list of available LLM providers"""
        return plugin_loader.get_available_providers('llm')

    @classmethod
    def register(cls, name: str, provider_class: type[LLMProvider]) -> None:
        """Manually register a provider (for testing)"""
        plugin_loader.register_provider('llm', name, provider_class)


class NoteStoreProviderFactory:
    """Factory for creating note store providers

    Providers are discovered via entry points in the 'second_brain.note_store' group.

    Built-in providers:
        - sqlite: SQLite file at settings.database_path
    """

    @classmethod
    def create(cls, settings: Settings) -> NoteStoreProvider:
        """Create note store provider based on settings

        Raises:
            ValueError: If provider not found
        """
        provider_name = settings.note_store_provider
        provider_class = plugin_loader.get_provider_class('note_store', provider_name)

        if not provider_class:
            available = ', '.join(cls.get_available_providers())
            raise ValueError(
                f"Unknown note store provider: {provider_name}. "
                f"Available: {available or 'none (check dependencies)'}"
            )

        logger.info(f"Creating note store provider: {provider_name}")
        return provider_class(settings)

    @classmethod
    def get_available_providers(cls) -> list[str]:
        """Get list of available note store providers"""
        return plugin_loader.get_available_providers('note_store')

    @classmethod
    def register(cls, name: str, provider_class: type[NoteStoreProvider]) -> None:
        """Manually register a provider (for testing)"""
        plugin_loader.register_provider('note_store', name, provider_class)


class PatternStoreProviderFactory:
    """Factory for creating pattern store providers

    Providers are discovered via entry points in the 'second_brain.pattern_store' group.

    Built-in providers:
        - sqlite: SQLite file at settings.database_path
    """

    @classmethod
    def create(cls, settings: Settings) -> PatternStoreProvider:
        """Create pattern store provider based on settings

        Raises:
            ValueError: If provider not found
        """
        provider_name = settings.pattern_store_provider
        provider_class = plugin_loader.get_provider_class('pattern_store', provider_name)

        if not provider_class:
            available = ', '.join(cls.get_available_providers())
            raise ValueError(
                f"Unknown pattern store provider: {provider_name}. "
                f"Available: {available or 'none (check dependencies)'}"
            )

        logger.info(f"Creating pattern store provider: {provider_name}")
        return provider_class(settings)

    @classmethod
    def get_available_providers(cls) -> list[str]:
        """Get list of available pattern store providers"""
        return plugin_loader.get_available_providers('pattern_store')

    @classmethod
    def register(cls, name: str, provider_class: type[PatternStoreProvider]) -> None:
        """Manually register a provider (for testing)"""
        plugin_loader.register_provider('pattern_store', name, provider_class)
