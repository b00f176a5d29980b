"""
project: mapgen
module: dungeon_api.py
License: MIT

Dungeon generation HTTP routes.

Every endpoint accepts the same query parameters:
    seed       int or string (strings are hashed, see seed_api)
    size       0..2 or small/medium/large
    hidden     0..2 or low/med/high
    niches     0..2 or low/med/high
    deception  0..2 or low/med/high
"""

import threading

from flask import Blueprint, Response, current_app, jsonify, request

from mapgen.dungeon import Generator, InvalidParameterError, MapConfig, map_statistics, validate_map
from mapgen.dungeon.render import render_ascii
from mapgen.logging_utils import get_logger
from mapgen.routes.seed_api import _coerce_seed

log = get_logger("mapgen.api")

# In-process cache (seed, presets) -> Generator. Guarded by a lock because the
# dev server may handle requests on several threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()
_DUNGEON_CACHE_MAX = 8


def get_cached_dungeon(seed: int, config: MapConfig) -> Generator:
    key = (seed,) + config.as_tuple()
    with _dungeon_cache_lock:
        gen = _dungeon_cache.get(key)
        if gen is not None:
            return gen
    gen = Generator(seed=seed, config=config)
    gen.generate()
    cap = current_app.config.get("MAPGEN_CACHE_MAX", _DUNGEON_CACHE_MAX)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = gen
        while len(_dungeon_cache) > max(1, cap):
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key == key:
                break
            _dungeon_cache.pop(first_key, None)
    return gen


def clear_cache():
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


bp_dungeon = Blueprint("dungeon", __name__)


def _request_dungeon():
    args = request.args
    cfg = current_app.config
    # query string first, then MAPGEN_* app config, then the presets
    config = MapConfig(
        args.get("size", cfg.get("MAPGEN_SIZE", 1)),
        args.get("hidden", cfg.get("MAPGEN_HIDDEN", 0)),
        args.get("niches", cfg.get("MAPGEN_NICHES", 0)),
        args.get("deception", cfg.get("MAPGEN_DECEPTION", 0)),
    )
    seed = _coerce_seed(args.get("seed"))
    return get_cached_dungeon(seed, config)


@bp_dungeon.errorhandler(InvalidParameterError)
def _invalid_parameter(exc):
    return jsonify({"error": str(exc)}), 400


def _failed(gen):
    return jsonify({"error": str(gen.last_error), "seed": gen.seed}), 422


@bp_dungeon.route("/api/dungeon/map")
def dungeon_map():
    """
    Return the generated map as ASCII rows plus room and stair metadata.
    Response: { 'seed', 'width', 'height', 'rows', 'rooms', 'stairs', 'metrics' }
    """
    gen = _request_dungeon()
    if not gen.generated:
        return _failed(gen)
    rooms = [
        {"id": i, "x": r.x, "y": r.y, "w": r.w, "h": r.h, "priority": r.priority}
        for i, r in enumerate(gen.rooms)
    ]
    return jsonify(
        {
            "seed": gen.seed,
            "width": gen.width,
            "height": gen.height,
            "rows": render_ascii(gen.store),
            "rooms": rooms,
            "stairs": {"up": list(gen.up_stairs), "down": list(gen.down_stairs)},
            "metrics": gen.metrics,
        }
    )


@bp_dungeon.route("/api/dungeon/packed")
def dungeon_packed():
    gen = _request_dungeon()
    if not gen.generated:
        return _failed(gen)
    resp = Response(gen.packed(), mimetype="application/octet-stream")
    resp.headers["X-Map-Width"] = str(gen.width)
    resp.headers["X-Map-Height"] = str(gen.height)
    resp.headers["X-Map-Seed"] = str(gen.seed)
    return resp


@bp_dungeon.route("/api/dungeon/validate")
def dungeon_validate():
    gen = _request_dungeon()
    if not gen.generated:
        return _failed(gen)
    problems = validate_map(gen)
    return jsonify({"seed": gen.seed, "valid": not problems, "problems": problems, "stats": map_statistics(gen)})
