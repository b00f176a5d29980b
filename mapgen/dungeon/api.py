"""Process-wide generation API.

Thin functions over one shared ``Generator`` for callers that do not want to
hold a handle. Generation is single-threaded; the shared instance is not
meant to be driven from several threads at once.
"""
from __future__ import annotations

from typing import Optional, Tuple

from .config import MapConfig, MapParameters
from .pipeline import Generator

_generator: Optional[Generator] = None


def mapgen_get_generator() -> Generator:
    global _generator
    if _generator is None:
        _generator = Generator()
    return _generator


def mapgen_init(seed: Optional[int] = None) -> int:
    return mapgen_get_generator().init(seed)


def mapgen_set_parameters(params) -> MapParameters:
    return mapgen_get_generator().set_parameters(params)


def mapgen_generate_dungeon() -> int:
    return mapgen_get_generator().generate()


def mapgen_generate_with_params(size: int, hidden: int, niches: int, deception: int) -> int:
    """Generate with presets given as small integers (each 0..2)."""
    config = MapConfig.from_values(size, hidden, niches, deception)
    gen = mapgen_get_generator()
    gen.set_parameters(config)
    return gen.generate()


def mapgen_get_seed() -> int:
    return mapgen_get_generator().seed


def mapgen_reset_seed_flag() -> None:
    mapgen_get_generator().reset_seed_flag()


def mapgen_get_map_size() -> Tuple[int, int]:
    return mapgen_get_generator().map_size


def get_map_tile(x: int, y: int) -> int:
    return mapgen_get_generator().get_map_tile(x, y)


def coords_in_bounds(x: int, y: int) -> bool:
    return mapgen_get_generator().coords_in_bounds(x, y)


def point_in_room(x: int, y: int, room_id: int) -> bool:
    return mapgen_get_generator().point_in_room(x, y, room_id)


def get_room_count() -> int:
    return mapgen_get_generator().room_count


def get_rooms():
    return tuple(mapgen_get_generator().rooms)


__all__ = [
    "mapgen_get_generator",
    "mapgen_init",
    "mapgen_set_parameters",
    "mapgen_generate_dungeon",
    "mapgen_generate_with_params",
    "mapgen_get_seed",
    "mapgen_reset_seed_flag",
    "mapgen_get_map_size",
    "get_map_tile",
    "coords_in_bounds",
    "point_in_room",
    "get_room_count",
    "get_rooms",
]
