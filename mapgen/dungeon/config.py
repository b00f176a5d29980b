"""Presets and derived generation parameters.

``MapConfig`` is what callers choose (a size preset plus three obfuscation
levels). ``MapParameters`` is the concrete record the phases read. Use
``parameters_for`` to derive one from the other; ``validate_and_adjust``
keeps hand-built parameters inside what the placer can satisfy.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import IntEnum

from .errors import InvalidParameterError

MAX_ROOMS = 20
MIN_ROOM_SIZE = 4
MAX_ROOM_SIZE = 8
MIN_ROOM_DISTANCE = 4
MAP_MARGIN = 3
GRID_SIZE = 4
MAX_PATH_LENGTH = 512
PLACEMENT_RETRIES = 20
EDIT_TRIALS = 8


class MapSize(IntEnum):
    SMALL = 0
    MEDIUM = 1
    LARGE = 2


class Level(IntEnum):
    LOW = 0
    MED = 1
    HIGH = 2


LEVEL_PERCENT = {Level.LOW: 10, Level.MED: 25, Level.HIGH: 50}

# size preset -> (width, height, max_rooms, grid_size)
SIZE_PRESETS = {
    MapSize.SMALL: (48, 48, 8, 3),
    MapSize.MEDIUM: (64, 64, 12, 4),
    MapSize.LARGE: (80, 80, 16, 5),
}

_LEVEL_ALIASES = {"low": Level.LOW, "med": Level.MED, "medium": Level.MED, "high": Level.HIGH}


def _coerce(value, enum_cls, aliases, what):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in aliases:
            return aliases[key]
        if key.isdigit():
            value = int(key)
        else:
            raise InvalidParameterError(f"unknown {what} {value!r}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{what} must be an integer 0..2, got {value!r}")
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidParameterError(f"{what} out of range: {value}") from None


def coerce_size(value) -> MapSize:
    aliases = {m.name.lower(): m for m in MapSize}
    return _coerce(value, MapSize, aliases, "map size")


def coerce_level(value) -> Level:
    return _coerce(value, Level, _LEVEL_ALIASES, "obfuscation level")


@dataclass
class MapConfig:
    map_size: MapSize = MapSize.MEDIUM
    hidden_rooms: Level = Level.LOW
    niches: Level = Level.LOW
    deception: Level = Level.LOW

    def __post_init__(self):
        self.map_size = coerce_size(self.map_size)
        self.hidden_rooms = coerce_level(self.hidden_rooms)
        self.niches = coerce_level(self.niches)
        self.deception = coerce_level(self.deception)

    @classmethod
    def from_values(cls, size, hidden, niches, deception) -> "MapConfig":
        return cls(size, hidden, niches, deception)

    def as_tuple(self):
        return (int(self.map_size), int(self.hidden_rooms), int(self.niches), int(self.deception))


@dataclass
class MapParameters:
    map_width: int = 64
    map_height: int = 64
    grid_size: int = GRID_SIZE
    max_rooms: int = MAX_ROOMS
    min_room_size: int = MIN_ROOM_SIZE
    max_room_size: int = MAX_ROOM_SIZE
    hidden_percent: int = 10
    niche_percent: int = 10
    deception_percent: int = 10
    secret_rooms: int = 0
    niche_count: int = 0
    deception_corridors: int = 0

    @property
    def area(self) -> int:
        return self.map_width * self.map_height


def scaled_count(percent: int, base: int) -> int:
    """ceil(percent% of base), zero for an empty base."""
    if base <= 0 or percent <= 0:
        return 0
    return math.ceil(percent * base / 100)


def validate_and_adjust(params: MapParameters) -> MapParameters:
    """Return a copy of ``params`` the placer can work with.

    Raises InvalidParameterError for impossible values; trims room counts
    that cannot fit the grid or the density limit.
    """
    if params.map_width <= 0 or params.map_height <= 0:
        raise InvalidParameterError(f"map size must be positive, got {params.map_width}x{params.map_height}")
    if params.grid_size <= 0:
        raise InvalidParameterError(f"grid size must be positive, got {params.grid_size}")
    if not 1 <= params.min_room_size <= params.max_room_size:
        raise InvalidParameterError(
            f"room size bounds invalid: {params.min_room_size}..{params.max_room_size}"
        )
    for name in ("hidden_percent", "niche_percent", "deception_percent"):
        pct = getattr(params, name)
        if not 0 <= pct <= 100:
            raise InvalidParameterError(f"{name} out of range: {pct}")
    max_rooms = min(params.max_rooms, MAX_ROOMS, params.grid_size * params.grid_size)
    # density: keep room footprint under half the map
    if max_rooms * 64 > params.area // 2:
        max_rooms = max(2, (params.area // 2) // 64)
    max_rooms = max(0, max_rooms)
    adjusted = replace(params, max_rooms=max_rooms)
    adjusted.secret_rooms = scaled_count(adjusted.hidden_percent, max_rooms)
    adjusted.niche_count = scaled_count(adjusted.niche_percent, max_rooms - 1)
    adjusted.deception_corridors = scaled_count(adjusted.deception_percent, max_rooms)
    return adjusted


def parameters_for(config: MapConfig) -> MapParameters:
    width, height, max_rooms, grid = SIZE_PRESETS[config.map_size]
    params = MapParameters(
        map_width=width,
        map_height=height,
        grid_size=grid,
        max_rooms=max_rooms,
        hidden_percent=LEVEL_PERCENT[config.hidden_rooms],
        niche_percent=LEVEL_PERCENT[config.niches],
        deception_percent=LEVEL_PERCENT[config.deception],
    )
    return validate_and_adjust(params)


__all__ = [
    "MapSize",
    "Level",
    "MapConfig",
    "MapParameters",
    "LEVEL_PERCENT",
    "SIZE_PRESETS",
    "coerce_size",
    "coerce_level",
    "parameters_for",
    "scaled_count",
    "validate_and_adjust",
]
