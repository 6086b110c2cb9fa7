"""Provider package - Extensible provider architecture for Second Brain

Providers are discovered via Python entry points, allowing both built-in
and external providers to be registered in pyproject.toml.

Usage:
    from second_brain.providers import LLMProviderFactory
    provider = LLMProviderFactory.create(settings)

External plugins can add providers by defining entry points:
    [project.entry-points."second_brain.llm"]
    my_provider = "my_package.provider:MyLLMProvider"
"""

from . import plugin_loader
from .base import LLMProvider, NoteStoreProvider, PatternStoreProvider, ProviderError
from .factories import LLMProviderFactory, NoteStoreProviderFactory, PatternStoreProviderFactory

__all__ = [
    # Base classes
    'LLMProvider',
    'NoteStoreProvider',
    'PatternStoreProvider',
    'ProviderError',
    # Factories
    'LLMProviderFactory',
    'NoteStoreProviderFactory',
    'PatternStoreProviderFactory',
    # Plugin loader (for advanced usage)
    'plugin_loader',
]
