"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from fastapi.testclient import TestClient

from config.spec_catalog import DEFAULT_SPEC_CATALOG
from models.smart_paste import SpecCatalog
from services.alias_store_service import reset_alias_store
from services.paste_history_service import reset_paste_history
from services.preview_cache_service import clear_previews
from services.smart_paste_service import reset_smart_paste_service
from tests.factories import SpecCatalogFactory


# ===================
# SESSION STATE
# ===================

@pytest.fixture(autouse=True)
def fresh_session():
    """Every test starts with no aliases, previews or history."""
    reset_alias_store()
    reset_paste_history()
    reset_smart_paste_service()
    clear_previews()
    yield
    reset_alias_store()
    reset_paste_history()
    reset_smart_paste_service()
    clear_previews()


# ===================
# CATALOGS
# ===================

@pytest.fixture
def gear_catalog() -> SpecCatalog:
    """Built-in gear catalog."""
    return SpecCatalog.from_dict(DEFAULT_SPEC_CATALOG)


@pytest.fixture
def general_catalog() -> SpecCatalog:
    """Small catalog with common product fields."""
    return SpecCatalogFactory.create()


@pytest.fixture
def weight_kg_catalog() -> SpecCatalog:
    """Catalog whose weight field names its unit."""
    return SpecCatalogFactory.create({"Cameras": ["Sensor Type", "Weight (kg)"]})


# ===================
# API CLIENT
# ===================

@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from main import app
    return TestClient(app)
