import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from mapgen import create_app  # noqa: E402
from mapgen.dungeon import api as mapgen_api  # noqa: E402
from mapgen.routes.dungeon_api import clear_cache  # noqa: E402

_PRESET_ENV = ("MAPGEN_SIZE", "MAPGEN_HIDDEN", "MAPGEN_NICHES", "MAPGEN_DECEPTION", "MAPGEN_ENABLE_METRICS")


@pytest.fixture(autouse=True)
def _isolate_presets(monkeypatch):
    """Keep a developer's .env or shell presets from leaking into generation."""
    for key in _PRESET_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(mapgen_api, "_generator", None)
    yield


@pytest.fixture()
def test_app():
    app = create_app({"TESTING": True})
    clear_cache()
    yield app
    clear_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


def pytest_configure(config):  # register custom markers
    config.addinivalue_line("markers", "structure: structural invariants checked over several seeds")
    config.addinivalue_line("markers", "performance: generation timing guardrails")
