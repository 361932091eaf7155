"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for scheduling and recency tests."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_mcq():
    """Provide a stored MCQ as the platform persists it."""
    return {
        "id": "q-mcq-001",
        "type": "mcq",
        "options": '["Berlin", "Paris", "Madrid", "Rome"]',
        "answer": "1",
        "difficulty": 2,
        "explanation": "Paris has been the capital since 987.",
    }


@pytest.fixture
def sample_slider():
    """Provide a stored slider question."""
    return {
        "id": "q-slider-001",
        "type": "slider",
        "options": [0, 10, 0.5, "pH"],
        "answer": "7",
        "sourceMeta": '{"slider": {"tolerance": 0.2}}',
    }


@pytest.fixture
def sample_multi_step():
    """Provide a scaffolded multi-step question."""
    return {
        "id": "q-multi-001",
        "type": "multi_step",
        "answer": "42",
        "assets": {
            "steps": [
                {"prompt": "Add 20 and 1", "options": ["20", "21", "22"], "answer": 1},
                {"prompt": "Double it", "answer": "42"},
            ]
        },
    }
