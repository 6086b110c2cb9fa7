"""HTTP client factory with connection pooling and circuit breaker protection.

Each provider gets its own pooled httpx client and its own circuit breaker.
Calls are attempted once: provider-level fallback (FallbackLLMProvider) and
the narrator's templated sentence are the only recovery paths.
"""

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from second_brain.providers.resilience.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


class CircuitOpenError(RuntimeError):
    """Raised when a call is rejected because the provider's circuit is open"""


@dataclass
class HttpClientConfig:
    """Configuration for a pooled, circuit-protected HTTP client."""

    # Connection settings
    base_url: str
    headers: dict[str, str]

    # Timeout settings (seconds)
    default_timeout: float = 60.0
    connect_timeout: float = 10.0
    write_timeout: float = 10.0
    pool_timeout: float = 5.0

    # Connection pool limits
    max_connections: int = 10
    max_keepalive_connections: int = 5
    keepalive_expiry: float = 30.0

    # Circuit breaker configuration
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout: float = 60.0
    circuit_breaker_half_open_max_calls: int = 1

    def __post_init__(self):
        """Validate configuration."""
        self.base_url = self.base_url.rstrip("/")

        if self.max_connections < self.max_keepalive_connections:
            raise ValueError(
                f"max_connections ({self.max_connections}) must be >= "
                f"max_keepalive_connections ({self.max_keepalive_connections})"
            )
        if self.circuit_breaker_threshold <= 0:
            raise ValueError(
                f"circuit_breaker_threshold must be > 0, got {self.circuit_breaker_threshold}"
            )


class HttpClient:
    """Thread-safe HTTP client guarded by a circuit breaker."""

    def __init__(self, config: HttpClientConfig):
        self.config = config

        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=httpx.Timeout(
                connect=config.connect_timeout,
                read=config.default_timeout,
                write=config.write_timeout,
                pool=config.pool_timeout
            ),
            limits=httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=config.max_keepalive_connections,
                keepalive_expiry=config.keepalive_expiry
            ),
            headers=config.headers,
            follow_redirects=True
        )

        self.circuit_breaker = CircuitBreaker(
            threshold=config.circuit_breaker_threshold,
            timeout=config.circuit_breaker_timeout,
            half_open_max_calls=config.circuit_breaker_half_open_max_calls
        )

        logger.debug(
            f"Initialized HttpClient: base_url={config.base_url}, "
            f"timeout={config.default_timeout}s"
        )

    def guarded(self, operation: Callable[[], httpx.Response], operation_name: str) -> httpx.Response:
        """Run one request through the circuit breaker.

        Non-2xx responses count as failures and raise httpx.HTTPStatusError.

        Raises:
            CircuitOpenError: If the circuit breaker rejects the call
            httpx.HTTPError: On network errors, HTTP errors or timeout
        """
        request_id = str(uuid.uuid4())[:8]

        if not self.circuit_breaker.can_attempt():
            logger.warning(f"[{request_id}] {operation_name} rejected - circuit breaker OPEN")
            raise CircuitOpenError(f"Circuit breaker OPEN for {self.config.base_url}")

        try:
            response = operation()
            response.raise_for_status()
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.warning(f"[{request_id}] {operation_name} failed: {e}")
            raise

        self.circuit_breaker.record_success()
        logger.debug(f"[{request_id}] {operation_name} succeeded")
        return response

    def post(
        self,
        endpoint: str,
        json: dict,
        timeout: float | None = None
    ) -> httpx.Response:
        """Make a POST request.

        Args:
            endpoint: API endpoint (e.g., "/api/generate")
            json: JSON payload to send in request body
            timeout: Optional read timeout override in seconds
        """
        def operation():
            return self._client.post(endpoint, json=json, timeout=self._build_timeout(timeout))

        return self.guarded(operation, f"POST {endpoint}")

    def get(self, endpoint: str, timeout: float | None = None) -> httpx.Response:
        """Make a GET request.

        Args:
            endpoint: API endpoint (e.g., "/api/tags")
            timeout: Optional read timeout override in seconds
        """
        def operation():
            return self._client.get(endpoint, timeout=self._build_timeout(timeout))

        return self.guarded(operation, f"GET {endpoint}")

    def _build_timeout(self, timeout: float | None):
        """Build httpx.Timeout from optional override."""
        if timeout is None:
            return httpx.USE_CLIENT_DEFAULT

        return httpx.Timeout(
            connect=self.config.connect_timeout,
            read=timeout,
            write=self.config.write_timeout,
            pool=self.config.pool_timeout
        )

    def close(self):
        """Close the underlying connection pool."""
        self._client.close()

    def get_stats(self) -> dict:
        """Get current client statistics."""
        return {
            "base_url": self.config.base_url,
            "default_timeout": self.config.default_timeout,
            "circuit_breaker": self.circuit_breaker.get_stats(),
        }


class HttpClientFactory:
    """Registry of HTTP clients keyed by provider name.

    Each provider gets its own client instance with separate circuit breaker
    state. Thread-safe: uses double-checked locking for client creation.
    """

    _clients: dict[str, HttpClient] = {}
    _lock: threading.Lock = threading.Lock()

    @classmethod
    def get_client(cls, provider_name: str, config: HttpClientConfig) -> HttpClient:
        """Get or create HTTP client for a provider.

        Args:
            provider_name: Unique provider identifier (e.g., "ollama", "gemini")
            config: HttpClientConfig used when the client is first created
        """
        if provider_name in cls._clients:
            return cls._clients[provider_name]

        with cls._lock:
            if provider_name in cls._clients:
                return cls._clients[provider_name]

            logger.info(f"Creating HttpClient for provider: {provider_name} ({config.base_url})")
            client = HttpClient(config)
            cls._clients[provider_name] = client
            return client

    @classmethod
    def reset(cls):
        """Close all clients and clear the registry (tests and shutdown)."""
        with cls._lock:
            for provider_name, client in cls._clients.items():
                try:
                    client.close()
                except Exception as e:
                    logger.warning(f"Error closing client for {provider_name}: {e}")
            cls._clients.clear()
            logger.debug("HttpClientFactory reset - all clients closed")
