"""Fixtures for API route tests: a real service root on a throwaway database"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from second_brain.brain import SecondBrain

ROUTE_MODULES = ("ai", "health", "knowledge", "patterns")


@pytest.fixture
def brain(test_settings, note_store, pattern_store, mock_llm_provider):
    return SecondBrain(
        config=test_settings,
        note_store=note_store,
        pattern_store=pattern_store,
        llm=mock_llm_provider,
    )


@pytest.fixture
def client(brain):
    """TestClient whose routes all resolve get_brain() to the fixture brain"""
    from second_brain.api.main import app

    patches = [
        patch(f"second_brain.api.routes.{module}.get_brain", return_value=brain)
        for module in ROUTE_MODULES
    ]
    for p in patches:
        p.start()
    try:
        yield TestClient(app)
    finally:
        for p in patches:
            p.stop()
