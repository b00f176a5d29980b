"""ASCII rendering of a finished map (one string per row)."""
from __future__ import annotations

from typing import List

from .tiles import DOOR, DOWN_STAIRS, EMPTY, FLOOR, UP_STAIRS, WALL

TILE_CHARS = {
    EMPTY: " ",
    WALL: "#",
    FLOOR: ".",
    DOOR: "+",
    UP_STAIRS: "<",
    DOWN_STAIRS: ">",
}
CHAR_TILES = {ch: tile for tile, ch in TILE_CHARS.items()}


def tile_to_char(tile: int) -> str:
    return TILE_CHARS.get(tile, "?")


def char_to_tile(ch: str) -> int:
    """Inverse of tile_to_char; unknown characters read as EMPTY."""
    return CHAR_TILES.get(ch, EMPTY)


def render_ascii(store) -> List[str]:
    return [
        "".join(tile_to_char(store.get(x, y)) for x in range(store.width))
        for y in range(store.height)
    ]
