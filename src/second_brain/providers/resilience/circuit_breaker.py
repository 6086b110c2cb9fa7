"""Circuit breaker guarding the LLM HTTP clients.

A pattern run narrates up to thirty themes one after another. When Ollama is
stopped or the Gemini quota is gone, every one of those calls would wait for
its timeout; the breaker turns them into instant rejections so the fallback
chain and the narrator's template sentence take over right away.
"""

import logging
import threading
import time
from enum import Enum

from second_brain.types import utcnow

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Thread-safe breaker shared by all calls to one provider.

    `threshold` consecutive failures open the circuit. After `timeout` seconds
    it lets `half_open_max_calls` probe requests through; that many successes
    close it again, a single failure reopens it.
    """

    def __init__(self, threshold: int, timeout: float, half_open_max_calls: int = 1):
        if threshold <= 0:
            raise ValueError("threshold must be > 0")
        if timeout < 0:
            raise ValueError("timeout must be >= 0")

        self.threshold = threshold
        self.timeout = timeout
        self.half_open_max_calls = half_open_max_calls

        self._state = CircuitState.CLOSED
        self._failures = 0
        self._probe_successes = 0
        self._probes_started = 0
        self._opened_at = 0.0  # time.monotonic() of the failure that (re)opened
        self._last_failure = None
        self._lock = threading.Lock()

    def _refresh(self) -> CircuitState:
        """Move OPEN to HALF_OPEN once the recovery wait is over. Caller holds the lock."""
        if self._state is CircuitState.OPEN:
            waited = time.monotonic() - self._opened_at
            if waited >= self.timeout:
                logger.info(f"Circuit half-open after {waited:.1f}s, allowing probe requests")
                self._state = CircuitState.HALF_OPEN
                self._probes_started = 0
                self._probe_successes = 0
        return self._state

    def _open(self, reason: str):
        self._state = CircuitState.OPEN
        self._opened_at = time.monotonic()
        logger.warning(f"Circuit opened: {reason}")

    def can_attempt(self) -> bool:
        """Whether a request may go out now (reserves a probe slot when half-open)"""
        with self._lock:
            state = self._refresh()
            if state is CircuitState.CLOSED:
                return True
            if state is CircuitState.HALF_OPEN and self._probes_started < self.half_open_max_calls:
                self._probes_started += 1
                return True
            return False

    def record_success(self) -> None:
        with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._probe_successes += 1
                if self._probe_successes >= self.half_open_max_calls:
                    self._state = CircuitState.CLOSED
                    self._failures = 0
                    logger.info("Circuit closed, provider recovered")
            elif self._state is CircuitState.CLOSED:
                self._failures = 0

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._last_failure = utcnow()

            if self._state is CircuitState.HALF_OPEN:
                self._open("probe request failed")
            elif self._state is CircuitState.CLOSED and self._failures >= self.threshold:
                self._open(f"{self._failures} consecutive failures")

    def get_state(self) -> CircuitState:
        with self._lock:
            return self._refresh()

    def get_stats(self) -> dict:
        """Breaker counters for the health output"""
        with self._lock:
            return {
                "state": self._refresh().value,
                "failure_count": self._failures,
                "success_count": self._probe_successes,
                "last_failure": self._last_failure.isoformat() if self._last_failure else None,
            }
