"""Shared resilience utilities for providers.

Provides the circuit breaker and the HTTP client factory used by every
HTTP-backed LLM provider.
"""

from .circuit_breaker import CircuitBreaker, CircuitState
from .http_client import CircuitOpenError, HttpClient, HttpClientConfig, HttpClientFactory

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "CircuitOpenError",
    "HttpClientFactory",
    "HttpClient",
    "HttpClientConfig",
]
