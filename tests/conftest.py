import pytest
from fastapi.testclient import TestClient

from recipekit.deps import get_registry, get_settings
from recipekit.main import app
from recipekit.services.unit_conversion import ConversionRegistry
from recipekit.settings import Settings

PANCAKES = """Pancakes
Serves 4
Ingredients:
2 cups flour
1 cup milk
2 eggs
salt to taste
Instructions:
1. Mix
2. Cook
"""


@pytest.fixture
def registry():
    return ConversionRegistry.standard()


@pytest.fixture
def pancakes_text():
    return PANCAKES


@pytest.fixture
def client(registry):
    # Pin the process registry and settings so env-configured house rules
    # cannot leak into tests
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_settings] = lambda: Settings(strict_conversion=True, house_rules=[])
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
