from types import SimpleNamespace

from mapgen.dungeon.errors import PlacementShortfall
from mapgen.routes import dungeon_api


def test_map_endpoint(client):
    resp = client.get("/api/dungeon/map?seed=42&size=small")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["seed"] == 42
    assert (data["width"], data["height"]) == (48, 48)
    assert len(data["rows"]) == 48
    text = "".join(data["rows"])
    assert text.count("<") == 1 and text.count(">") == 1
    ux, uy = data["stairs"]["up"]
    assert data["rows"][uy][ux] == "<"
    assert data["rooms"][0]["priority"] == 10
    assert "phase_ms" in data["metrics"]


def test_map_is_cached_per_seed_and_presets(client):
    client.get("/api/dungeon/map?seed=7&size=0")
    client.get("/api/dungeon/map?seed=7&size=0")
    assert len(dungeon_api._dungeon_cache) == 1
    client.get("/api/dungeon/map?seed=7&size=0&hidden=high")
    assert len(dungeon_api._dungeon_cache) == 2


def test_cache_cap(test_app):
    test_app.config["MAPGEN_CACHE_MAX"] = 2
    client = test_app.test_client()
    for seed in (1, 2, 3):
        assert client.get(f"/api/dungeon/packed?seed={seed}&size=small").status_code == 200
    assert len(dungeon_api._dungeon_cache) == 2
    assert (1, 0, 0, 0, 0) not in dungeon_api._dungeon_cache


def test_packed_endpoint(client):
    resp = client.get("/api/dungeon/packed?seed=42&size=small")
    assert resp.status_code == 200
    assert resp.mimetype == "application/octet-stream"
    assert len(resp.data) == 864
    assert resp.headers["X-Map-Width"] == "48"
    assert resp.headers["X-Map-Seed"] == "42"


def test_validate_endpoint(client):
    resp = client.get("/api/dungeon/validate?seed=99&size=medium&hidden=high&niches=high&deception=high")
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["valid"] is True and data["problems"] == []
    assert data["stats"]["width"] == 64


def test_invalid_preset_is_400(client):
    resp = client.get("/api/dungeon/map?size=7")
    assert resp.status_code == 400
    assert "out of range" in resp.get_json()["error"]
    assert client.get("/api/dungeon/map?hidden=extreme").status_code == 400


def test_failed_generation_is_422(client, monkeypatch):
    failed = SimpleNamespace(generated=False, last_error=PlacementShortfall(1), seed=5)
    monkeypatch.setattr(dungeon_api, "get_cached_dungeon", lambda seed, config: failed)
    resp = client.get("/api/dungeon/map?seed=5")
    assert resp.status_code == 422
    assert resp.get_json() == {"error": str(PlacementShortfall(1)), "seed": 5}


def test_app_config_presets_apply_without_query(test_app):
    test_app.config.update(MAPGEN_SIZE="large", MAPGEN_DECEPTION="high")
    client = test_app.test_client()
    data = client.get("/api/dungeon/map?seed=5").get_json()
    assert (data["width"], data["height"]) == (80, 80)
    assert (5, 2, 0, 0, 2) in dungeon_api._dungeon_cache
    # query string still wins over app config
    data = client.get("/api/dungeon/map?seed=5&size=small").get_json()
    assert data["width"] == 48
