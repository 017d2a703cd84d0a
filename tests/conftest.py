"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from api.config import get_settings
from api.main import app

SAMPLE_SCRIPT = """Title: The Partial Line
Author: Jane Doe

INT. KITCHEN - NIGHT

[[A note about the kitchen]]
Rain beats on the window. [[Check the rain machine]] It is late.

BOB
(quietly)
Is anyone /* cut this */ home?

/* The whole
lost scene
goes here */

[[Orphaned open

Orphaned close]]

CUT TO:
"""


@pytest.fixture
def sample_script() -> str:
    """A short Fountain document mixing Notes, Boneyards and dialogue."""
    return SAMPLE_SCRIPT


@pytest.fixture
def clear_settings_cache():
    """Drop cached settings so env overrides take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)
