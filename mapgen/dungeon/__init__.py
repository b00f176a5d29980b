"""Dungeon map generation: packed tile store, seeded RNG and the phase pipeline."""

from .analysis import count_tiles, find_tiles, map_statistics, validate_map
from .config import Level, MapConfig, MapParameters, MapSize, parameters_for, validate_and_adjust
from .errors import (
    ConnectionFailure,
    ExportError,
    InvalidParameterError,
    MapgenError,
    PlacementShortfall,
)
from .pipeline import Generator, generate_map
from .rooms import Room
from .tiles import DOOR, DOWN_STAIRS, EMPTY, FLOOR, UP_STAIRS, WALKABLE, WALL, TileStore

__all__ = [
    "Generator",
    "generate_map",
    "MapConfig",
    "MapParameters",
    "MapSize",
    "Level",
    "parameters_for",
    "validate_and_adjust",
    "Room",
    "TileStore",
    "EMPTY",
    "WALL",
    "FLOOR",
    "DOOR",
    "UP_STAIRS",
    "DOWN_STAIRS",
    "WALKABLE",
    "MapgenError",
    "InvalidParameterError",
    "PlacementShortfall",
    "ConnectionFailure",
    "ExportError",
    "count_tiles",
    "find_tiles",
    "map_statistics",
    "validate_map",
]
