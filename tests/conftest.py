"""
Pytest fixtures for flight ranking tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from helpers import SIN_RECORD

from jetlag_ranking.airports.directory import AirportDirectory
from jetlag_ranking.airports.intelligence import StaticFacilitiesSource, normalize_intelligence
from jetlag_ranking.config import Settings
from jetlag_ranking.scoring.holistic_scorer import HolisticScorer


@pytest.fixture
def directory():
    """Built-in airport directory."""
    return AirportDirectory.default()


@pytest.fixture
def facilities():
    """Facility source that only knows Singapore Changi."""
    return StaticFacilitiesSource({"SIN": SIN_RECORD})


@pytest.fixture
def sin_intel():
    """Normalized Changi record."""
    return normalize_intelligence(SIN_RECORD, "SIN")


@pytest.fixture
def scorer(directory, facilities):
    """HolisticScorer with the built-in directory and Changi facilities."""
    return HolisticScorer(directory, facilities)


@pytest.fixture
def sequential_settings():
    """Settings that always score inline."""
    return Settings(max_workers=1, parallel_threshold=10_000, suggestion_limit=5, log_level="INFO")


@pytest.fixture
def parallel_settings():
    """Settings that always fan out to a thread pool."""
    return Settings(max_workers=4, parallel_threshold=1, suggestion_limit=5, log_level="INFO")
