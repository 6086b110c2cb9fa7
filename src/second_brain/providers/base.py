"""Base provider interfaces - Abstract base classes for all providers"""

import builtins
from abc import ABC, abstractmethod
from datetime import datetime

from second_brain.types import AnalysisRun, Note, ThemeInsight


class ProviderError(Exception):
    """Raised when an LLM provider cannot produce text (network, auth, rate limit, not configured)"""

    def __init__(self, message: str, provider: str | None = None):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    @abstractmethod
    def generate(self, prompt: str, **kwargs) -> str:
        """
        Generate text from a prompt

        Args:
            prompt: Input prompt
            **kwargs: Provider-specific parameters (e.g. temperature)

        Returns:
            Generated text

        Raises:
            ProviderError: If the provider is unreachable, rejects the request
                or is not configured
        """
        pass

    def is_available(self) -> bool:
        """
        Quick check whether the provider can be tried at all.

        Returns:
            True by default; providers with a cheap probe override this
        """
        return True

    def get_default_model(self) -> str:
        """
        Get the default model ID for this provider.

        Returns:
            Model ID string
        """
        return ""

    def get_name(self) -> str:
        """Get provider name"""
        return self.__class__.__name__


class NoteStoreProvider(ABC):
    """Abstract base class for note storage providers

    Notes are the raw input of the pattern observer. Listing order is
    always newest first (by created_at).
    """

    @abstractmethod
    def create(
        self,
        title: str,
        content: str,
        type: str = "note",
        tags: builtins.list[str] | None = None,
        summary: str | None = None,
        created_at: datetime | None = None
    ) -> Note:
        """
        Create a note

        Args:
            title: Note title
            content: Note body
            type: Free-form kind ("note", "link", ...)
            tags: Tags as entered by the user
            summary: Optional one-sentence summary
            created_at: Creation time (defaults to now, used by imports and tests)

        Returns:
            The stored note with its generated id
        """
        pass

    @abstractmethod
    def get(self, id: str) -> Note | None:
        """Get a note by ID, None if it does not exist"""
        pass

    @abstractmethod
    def list(self, limit: int | None = None) -> builtins.list[Note]:
        """List notes newest first, optionally capped at `limit`"""
        pass

    @abstractmethod
    def get_many(self, ids: builtins.list[str]) -> builtins.list[Note]:
        """Get the notes matching `ids` (unknown ids ignored), newest first"""
        pass

    @abstractmethod
    def update(
        self,
        id: str,
        title: str | None = None,
        content: str | None = None,
        type: str | None = None,
        tags: builtins.list[str] | None = None,
        summary: str | None = None
    ) -> Note | None:
        """
        Update the given fields of a note

        Returns:
            Updated note, or None if not found
        """
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete a note, True if it existed"""
        pass

    @abstractmethod
    def search(self, query: str, limit: int = 5) -> builtins.list[Note]:
        """Case-insensitive substring search over title and content"""
        pass

    def get_name(self) -> str:
        """Get provider name"""
        return self.__class__.__name__


class PatternStoreProvider(ABC):
    """Abstract base class for analysis run and insight persistence

    Runs move RUNNING -> COMPLETED | FAILED exactly once; implementations
    must reject a second terminal transition.
    """

    @abstractmethod
    def create_run(self) -> AnalysisRun:
        """Create a new run in RUNNING state"""
        pass

    @abstractmethod
    def complete_run(self, run_id: str, total_notes: int, themes_found: int) -> AnalysisRun:
        """
        Mark a run completed

        Raises:
            ValueError: If the run does not exist or is already terminal
        """
        pass

    @abstractmethod
    def fail_run(self, run_id: str, error: str) -> AnalysisRun:
        """
        Mark a run failed with an error message and drop any insights it stored

        Raises:
            ValueError: If the run does not exist or is already terminal
        """
        pass

    @abstractmethod
    def add_insights(self, run_id: str, insights: builtins.list[ThemeInsight]) -> builtins.list[ThemeInsight]:
        """
        Persist insights for a run (all or nothing)

        Returns:
            Stored insights carrying their id, run_id and created_at
        """
        pass

    @abstractmethod
    def get_run(self, run_id: str) -> AnalysisRun | None:
        """Get a run by ID"""
        pass

    @abstractmethod
    def get_latest_run(self) -> AnalysisRun | None:
        """Most recently started run of any status"""
        pass

    @abstractmethod
    def get_latest_completed_run(self) -> AnalysisRun | None:
        """Most recently completed run (by completed_at); failed runs never qualify"""
        pass

    @abstractmethod
    def list_runs(self, limit: int = 20) -> builtins.list[AnalysisRun]:
        """Runs newest first (by started_at)"""
        pass

    @abstractmethod
    def list_insights(self, run_id: str) -> builtins.list[ThemeInsight]:
        """Insights of a run ordered by count descending"""
        pass

    def get_name(self) -> str:
        """Get provider name"""
        return self.__class__.__name__
