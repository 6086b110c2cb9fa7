"""Ollama LLM provider"""

import logging
import time

import httpx

from second_brain.config import Settings
from second_brain.providers.base import LLMProvider, ProviderError
from second_brain.providers.resilience import CircuitOpenError, HttpClientConfig, HttpClientFactory

logger = logging.getLogger(__name__)


class OllamaLLMProvider(LLMProvider):
    """Ollama local LLM provider

    Talks to a local Ollama server through the shared pooled client, so a
    stopped server trips the circuit breaker instead of stalling every call.
    """

    HEALTH_CACHE_TTL = 5.0

    def __init__(self, settings: Settings):
        self.settings = settings
        self.model = settings.ollama_model
        self.llm_timeout = settings.ollama_llm_timeout
        self.health_timeout = settings.ollama_health_check_timeout

        config = HttpClientConfig(
            base_url=settings.ollama_url,
            headers={"Content-Type": "application/json"},
            default_timeout=settings.ollama_llm_timeout,
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_timeout=settings.circuit_breaker_timeout,
            circuit_breaker_half_open_max_calls=settings.circuit_breaker_half_open_max_calls,
        )
        self.client = HttpClientFactory.get_client("ollama", config)

        self._health_cache: tuple[float, bool] | None = None

    def generate(self, prompt: str, **kwargs) -> str:
        """Generate text from prompt"""
        temperature = kwargs.get('temperature', 0.7)

        request_payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature
            }
        }

        try:
            response = self.client.post(
                "/api/generate",
                json=request_payload,
                timeout=self.llm_timeout
            )
            return response.json()["response"]
        except (httpx.HTTPError, CircuitOpenError) as e:
            raise ProviderError(str(e), provider=self.get_name()) from e
        except (KeyError, ValueError) as e:
            raise ProviderError(f"Unexpected response from Ollama: {e}", provider=self.get_name()) from e

    def is_available(self) -> bool:
        """Probe /api/tags with the short health timeout (cached for a few seconds)"""
        now = time.monotonic()
        if self._health_cache and now - self._health_cache[0] < self.HEALTH_CACHE_TTL:
            return self._health_cache[1]

        try:
            self.client.get("/api/tags", timeout=self.health_timeout)
            healthy = True
        except (httpx.HTTPError, CircuitOpenError) as e:
            logger.debug(f"Ollama not available at {self.settings.ollama_url}: {e}")
            healthy = False

        self._health_cache = (now, healthy)
        return healthy

    def get_default_model(self) -> str:
        """Get the configured default model"""
        return self.model

    def get_name(self) -> str:
        """Get provider name"""
        return f"ollama/{self.model}"
