"""Contract test base classes for Second Brain providers.

These abstract test classes define the behavioral contract that all provider
implementations must satisfy. Provider packages should subclass these and
implement the provider fixture.

Usage in a provider package:
    from second_brain.testing import PatternStoreContractTest

    class TestPostgresPatternStore(PatternStoreContractTest):
        @pytest.fixture
        def provider(self):
            return PostgresPatternStore(test_settings)
"""

from .llm import FailingLLMContractTest, LLMContractTest
from .note_store import NoteStoreContractTest
from .pattern_store import PatternStoreContractTest

__all__ = [
    'LLMContractTest',
    'FailingLLMContractTest',
    'NoteStoreContractTest',
    'PatternStoreContractTest',
]
