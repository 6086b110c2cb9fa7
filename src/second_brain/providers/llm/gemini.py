"""Google Gemini LLM provider (Generative Language REST API)"""

import logging

import httpx

from second_brain.config import Settings
from second_brain.providers.base import LLMProvider, ProviderError
from second_brain.providers.resilience import CircuitOpenError, HttpClientConfig, HttpClientFactory

logger = logging.getLogger(__name__)


class GeminiLLMProvider(LLMProvider):
    """Gemini cloud LLM provider

    Requires GEMINI_API_KEY. Without a key the provider reports itself
    unavailable and every generate() call raises ProviderError, which lets the
    fallback chain move on to the next provider.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.model = settings.gemini_model
        self.api_key = settings.gemini_api_key
        self.timeout = settings.gemini_timeout
        self._client = None

    @property
    def client(self):
        """Lazy-create the pooled client (only once a key is configured)"""
        if self._client is None:
            config = HttpClientConfig(
                base_url=self.settings.gemini_url,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key or "",
                },
                default_timeout=self.timeout,
                circuit_breaker_threshold=self.settings.circuit_breaker_threshold,
                circuit_breaker_timeout=self.settings.circuit_breaker_timeout,
                circuit_breaker_half_open_max_calls=self.settings.circuit_breaker_half_open_max_calls,
            )
            self._client = HttpClientFactory.get_client("gemini", config)
        return self._client

    def generate(self, prompt: str, **kwargs) -> str:
        """Generate text from prompt"""
        if not self.api_key:
            raise ProviderError("GEMINI_API_KEY is not configured", provider=self.get_name())

        request_payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": kwargs.get('temperature', 0.7)},
        }

        try:
            response = self.client.post(
                f"/v1beta/models/{self.model}:generateContent",
                json=request_payload,
                timeout=self.timeout
            )
            data = response.json()
        except (httpx.HTTPError, CircuitOpenError) as e:
            raise ProviderError(str(e), provider=self.get_name()) from e
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from Gemini: {e}", provider=self.get_name()) from e

        return self._extract_text(data)

    def _extract_text(self, data: dict) -> str:
        """Join the text parts of the first candidate"""
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates returned")
            raise ProviderError(f"Gemini returned no text ({reason})", provider=self.get_name())

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    def is_available(self) -> bool:
        return bool(self.api_key)

    def get_default_model(self) -> str:
        return self.model

    def get_name(self) -> str:
        return f"gemini/{self.model}"
