"""Plugin loader for Second Brain providers - Entry point based discovery

Discovers and loads providers from entry points for all provider types.
Built-in providers are registered in this project's pyproject.toml and
third-party packages can add more under the same groups.

Entry Point Groups:
    - second_brain.llm: LLM providers
    - second_brain.note_store: Note storage providers
    - second_brain.pattern_store: Analysis run / insight storage providers

Usage:
    # Get all providers of a type
    providers = get_providers('llm')  # {'gemini': GeminiLLMProvider, ...}

    # Get a specific provider class
    provider_class = get_provider_class('llm', 'ollama')
"""

import importlib.metadata
import logging
from typing import Union

from .base import LLMProvider, NoteStoreProvider, PatternStoreProvider

logger = logging.getLogger(__name__)

ProviderType = Union[
    type[LLMProvider],
    type[NoteStoreProvider],
    type[PatternStoreProvider],
]

PROVIDER_GROUPS = {
    'llm': 'second_brain.llm',
    'note_store': 'second_brain.note_store',
    'pattern_store': 'second_brain.pattern_store',
}

# Cache for loaded providers: {provider_type: {name: class}}
_provider_cache: dict[str, dict[str, ProviderType]] = {}

# Track if full discovery has been performed
_loaded: bool = False


def discover_providers(group: str) -> dict[str, ProviderType]:
    """Discover providers for a specific entry point group

    Args:
        group: Entry point group name (e.g., 'second_brain.llm')

    Returns:
        Dictionary mapping provider names to provider classes

    Note:
        Providers with missing dependencies are skipped.
    """
    providers = {}

    try:
        for ep in importlib.metadata.entry_points().select(group=group):
            try:
                providers[ep.name] = ep.load()
                logger.debug(f"Discovered provider: {group}.{ep.name}")
            except ImportError as e:
                logger.debug(f"Skipping {group}.{ep.name}: missing dependency - {e}")
            except Exception as e:
                logger.warning(f"Failed to load provider {group}.{ep.name}: {e}")

    except Exception as e:
        logger.warning(f"Failed to discover providers for {group}: {e}")

    return providers


def get_providers(provider_type: str) -> dict[str, ProviderType]:
    """Get all discovered providers for a type

    Args:
        provider_type: Provider type ('llm', 'note_store', 'pattern_store')

    Returns:
        Dictionary mapping provider names to provider classes
    """
    if provider_type not in _provider_cache:
        group = PROVIDER_GROUPS.get(provider_type)
        if group:
            _provider_cache[provider_type] = discover_providers(group)
        else:
            logger.warning(f"Unknown provider type: {provider_type}")
            _provider_cache[provider_type] = {}

    return _provider_cache[provider_type]


def get_provider_class(provider_type: str, name: str) -> ProviderType | None:
    """Get a specific provider class, None if not found"""
    return get_providers(provider_type).get(name)


def get_available_providers(provider_type: str) -> list[str]:
    """Get list of provider names that are available (dependencies installed)"""
    return list(get_providers(provider_type).keys())


def load_all() -> None:
    """Pre-load all provider types into cache

    Optional - providers are loaded lazily by default.
    """
    global _loaded
    if _loaded:
        return

    for provider_type in PROVIDER_GROUPS:
        providers = get_providers(provider_type)
        logger.debug(f"Loaded {len(providers)} {provider_type} providers")

    _loaded = True
    logger.info("Provider discovery complete")


def reset() -> None:
    """Reset plugin loader cache

    For testing purposes only.
    """
    global _provider_cache, _loaded
    _provider_cache = {}
    _loaded = False
    logger.debug("Plugin loader cache reset")


def register_provider(provider_type: str, name: str, provider_class: ProviderType) -> None:
    """Manually register a provider

    Providers registered this way take precedence over entry point
    discovered providers.

    Example:
        >>> register_provider('llm', 'test', MockLLMProvider)
    """
    get_providers(provider_type)[name] = provider_class
    logger.debug(f"Manually registered provider: {provider_type}.{name}")
