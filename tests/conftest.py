import os

# Settings are read from the environment; give tests a known API key.
os.environ.setdefault("API_KEY", "test-api-key")

from datetime import datetime

import pytest

from ridebook.pricing import FareCalculator, LocationClassifier, default_pricing_config
from tests.fakes import NEW_YORK, FakeDirections


@pytest.fixture
def pricing_config():
    return default_pricing_config()


@pytest.fixture
def classifier(pricing_config):
    return LocationClassifier(pricing_config)


@pytest.fixture
def directions() -> FakeDirections:
    return FakeDirections()


@pytest.fixture
def calculator(directions, classifier, pricing_config) -> FareCalculator:
    return FareCalculator(directions, classifier, pricing_config)


@pytest.fixture
def now() -> datetime:
    """Tuesday 2026-03-10 09:00 in New York."""
    return datetime(2026, 3, 10, 9, 0, tzinfo=NEW_YORK)
