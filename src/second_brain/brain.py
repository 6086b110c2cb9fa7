"""Service root - wires providers, the note service and the pattern observer"""

import logging
import threading
from datetime import tzinfo
from zoneinfo import ZoneInfo

from second_brain.config import Settings, settings
from second_brain.notes import NoteService
from second_brain.patterns.narrator import InsightNarrator
from second_brain.patterns.observer import PatternObserver
from second_brain.patterns.queries import PatternQueries
from second_brain.providers import (
    LLMProvider,
    LLMProviderFactory,
    NoteStoreProvider,
    NoteStoreProviderFactory,
    PatternStoreProvider,
    PatternStoreProviderFactory,
)
from second_brain.workers.pattern_scheduler import PatternScheduler

logger = logging.getLogger(__name__)

# X-AI-Provider value that selects the configured provider
AUTO_PROVIDER = "auto"


class SecondBrain:
    """
    Process-wide container for the second brain services.

    Everything is created lazily on first use so that importing the API or
    the CLI never touches the database or an LLM server. Providers can be
    injected directly (tests) instead of being built from settings.
    """

    def __init__(
        self,
        config: Settings | None = None,
        note_store: NoteStoreProvider | None = None,
        pattern_store: PatternStoreProvider | None = None,
        llm: LLMProvider | None = None
    ):
        self.config = config or settings
        self._note_store = note_store
        self._pattern_store = pattern_store
        self._llm_provider = llm
        self._named_llms: dict[str, LLMProvider] = {}
        self._observer = None
        self._queries = None
        self._scheduler = None
        self._notes = None
        self._lock = threading.RLock()

    @property
    def note_store(self) -> NoteStoreProvider:
        """Lazy-load note store provider"""
        if self._note_store is None:
            self._note_store = NoteStoreProviderFactory.create(self.config)
            logger.info(f"Initialized note store: {self._note_store.get_name()}")
        return self._note_store

    @property
    def pattern_store(self) -> PatternStoreProvider:
        """Lazy-load pattern store provider"""
        if self._pattern_store is None:
            self._pattern_store = PatternStoreProviderFactory.create(self.config)
            logger.info(f"Initialized pattern store: {self._pattern_store.get_name()}")
        return self._pattern_store

    @property
    def llm_provider(self) -> LLMProvider:
        """Lazy-load the configured LLM provider"""
        if self._llm_provider is None:
            self._llm_provider = LLMProviderFactory.create(self.config)
            logger.info(f"Initialized LLM provider: {self._llm_provider.get_name()}")
        return self._llm_provider

    def get_llm(self, name: str | None = None) -> LLMProvider:
        """Get the LLM provider for an explicit name, or the configured one

        Raises:
            ValueError: If the name is not a known provider
        """
        if not name or name == AUTO_PROVIDER:
            return self.llm_provider

        with self._lock:
            if name not in self._named_llms:
                self._named_llms[name] = LLMProviderFactory.create(self.config, name=name)
            return self._named_llms[name]

    @property
    def timezone(self) -> tzinfo | None:
        """Zone used for timeline week boundaries (None = process local time)"""
        if self.config.timeline_timezone:
            return ZoneInfo(self.config.timeline_timezone)
        return None

    @property
    def observer(self) -> PatternObserver:
        """The single observer of this process (it owns the run-in-progress lock)"""
        if self._observer is None:
            with self._lock:
                if self._observer is None:  # Double-check pattern
                    self._observer = PatternObserver(
                        note_store=self.note_store,
                        pattern_store=self.pattern_store,
                        narrator=InsightNarrator(self.llm_provider),
                        tz=self.timezone,
                    )
        return self._observer

    @property
    def queries(self) -> PatternQueries:
        if self._queries is None:
            self._queries = PatternQueries(self.note_store, self.pattern_store, tz=self.timezone)
        return self._queries

    @property
    def scheduler(self) -> PatternScheduler:
        if self._scheduler is None:
            with self._lock:
                if self._scheduler is None:
                    self._scheduler = PatternScheduler(
                        observer=self.observer,
                        pattern_store=self.pattern_store,
                        interval_seconds=self.config.pattern_interval_hours * 3600,
                        min_gap_seconds=self.config.pattern_min_gap_hours * 3600,
                        startup_delay_seconds=self.config.pattern_startup_delay_seconds,
                    )
        return self._scheduler

    @property
    def notes(self) -> NoteService:
        if self._notes is None:
            self._notes = NoteService(self.note_store, self.get_llm)
        return self._notes


_brain: SecondBrain | None = None
_brain_lock = threading.Lock()


def get_brain() -> SecondBrain:
    """Get or create global service root (thread-safe)"""
    global _brain
    if _brain is None:
        with _brain_lock:
            # Double-check pattern
            if _brain is None:
                _brain = SecondBrain()
    return _brain
