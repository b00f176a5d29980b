"""Tile codes and the bit-packed tile store.

Each cell holds a 3-bit code. Cells are packed row-major: the tile at (x, y)
has index k = y * width + x and occupies bits [3k, 3k + 3) of the buffer,
least significant bit first, so a tile may straddle two bytes.

Invariants:
  * every cell holds one of the six valid codes; after clear() all are EMPTY
  * get() outside the map returns EMPTY and set() outside the map is a no-op
"""
from __future__ import annotations

from typing import Iterator, Optional, Tuple

EMPTY = 0
WALL = 1
FLOOR = 2
DOOR = 3
UP_STAIRS = 4
DOWN_STAIRS = 5
# 6 and 7 are reserved

TILE_BITS = 3
TILE_MASK = 0b111

TILE_NAMES = {
    EMPTY: "empty",
    WALL: "wall",
    FLOOR: "floor",
    DOOR: "door",
    UP_STAIRS: "up_stairs",
    DOWN_STAIRS: "down_stairs",
}
VALID_TILES = frozenset(TILE_NAMES)
WALKABLE = frozenset({FLOOR, DOOR, UP_STAIRS, DOWN_STAIRS})
STAIRS = frozenset({UP_STAIRS, DOWN_STAIRS})


def packed_size(width: int, height: int) -> int:
    """Bytes needed to hold width*height tiles at 3 bits each."""
    return (width * height * TILE_BITS + 7) // 8


class TileStore:
    def __init__(self, width: int, height: int, data: Optional[bytes] = None):
        if width < 0 or height < 0:
            raise ValueError(f"invalid map size {width}x{height}")
        self.width = width
        self.height = height
        size = packed_size(width, height)
        if data is None:
            self._data = bytearray(size)
        else:
            if len(data) != size:
                raise ValueError(f"packed buffer is {len(data)} bytes, expected {size}")
            self._data = bytearray(data)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "TileStore":
        store = cls(width, height, data)
        for x, y, tile in store.cells():
            if tile not in VALID_TILES:
                raise ValueError(f"reserved tile code {tile} at {(x, y)}")
        return store

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return EMPTY
        bit = (y * self.width + x) * TILE_BITS
        index, offset = bit >> 3, bit & 7
        value = self._data[index] >> offset
        if offset > 8 - TILE_BITS:
            value |= self._data[index + 1] << (8 - offset)
        return value & TILE_MASK

    def set(self, x: int, y: int, tile: int) -> None:
        if tile not in VALID_TILES:
            raise ValueError(f"invalid tile code {tile!r}")
        if not self.in_bounds(x, y):
            return
        bit = (y * self.width + x) * TILE_BITS
        index, offset = bit >> 3, bit & 7
        data = self._data
        data[index] = (data[index] & ~(TILE_MASK << offset) & 0xFF) | ((tile << offset) & 0xFF)
        if offset > 8 - TILE_BITS:
            spill = offset - (8 - TILE_BITS)
            high_mask = (1 << spill) - 1
            data[index + 1] = (data[index + 1] & ~high_mask & 0xFF) | (tile >> (8 - offset))

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self.get(x, y)

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    # Trial edits snapshot the whole buffer; it is at most a few kilobytes.
    def snapshot(self) -> bytes:
        return bytes(self._data)

    def restore(self, snapshot: bytes) -> None:
        if len(snapshot) != len(self._data):
            raise ValueError("snapshot does not match this store")
        self._data[:] = snapshot

    def __len__(self) -> int:
        return len(self._data)


__all__ = [
    "EMPTY",
    "WALL",
    "FLOOR",
    "DOOR",
    "UP_STAIRS",
    "DOWN_STAIRS",
    "TILE_NAMES",
    "VALID_TILES",
    "WALKABLE",
    "STAIRS",
    "packed_size",
    "TileStore",
]
