"""Shared pytest configuration and fixtures"""

import sys
from pathlib import Path

import pytest

# Add project root to path for search_tuner imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from search_tuner.documents import Document, load_documents
from search_tuner.scoring import SearchEngine

FIXTURES_DIR = Path(__file__).parent / "fixtures"
LOCATIONS_PATH = FIXTURES_DIR / "locations.json"


@pytest.fixture
def locations():
    """Sample corpus: cafes, dessert, sushi, pools, pickleball"""
    return load_documents(LOCATIONS_PATH)


@pytest.fixture
def engine(locations):
    """Engine initialized over the sample corpus, default configuration"""
    search_engine = SearchEngine()
    search_engine.initialize(locations)
    return search_engine


@pytest.fixture
def mocha_cafe():
    return Document(
        id=1,
        name="Mocha Cafe",
        category="cafe",
        tags=("coffee", "mocha", "espresso", "wifi"),
        description="Cozy cafe serving artisan mocha drinks and pastries",
        reviews=(
            "Best mocha latte in town!",
            "Love their white mocha",
            "Great atmosphere for working",
        ),
        rating=4.8,
        location="Downtown",
    )
