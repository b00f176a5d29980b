"""Coordinate helpers and the per-generation room caches."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

Point = Tuple[int, int]

CARDINALS = ((1, 0), (-1, 0), (0, 1), (0, -1))
NEIGHBORS_8 = CARDINALS + ((1, 1), (1, -1), (-1, 1), (-1, -1))


def coords_in_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def abs_diff(a: int, b: int) -> int:
    return a - b if a >= b else b - a


def manhattan(a: Point, b: Point) -> int:
    return abs_diff(a[0], b[0]) + abs_diff(a[1], b[1])


def point_in_room(x: int, y: int, room) -> bool:
    """True when (x, y) lies in the room interior."""
    return room.x <= x < room.x + room.w and room.y <= y < room.y + room.h


def point_in_expanded(x: int, y: int, room, pad: int = 1) -> bool:
    """True when (x, y) lies in the interior grown by ``pad`` cells per side."""
    return room.x - pad <= x < room.x + room.w + pad and room.y - pad <= y < room.y + room.h + pad


def point_on_ring(x: int, y: int, room) -> bool:
    """True for cells of the one-cell outer ring around the interior."""
    return point_in_expanded(x, y, room) and not point_in_room(x, y, room)


def ring_corners(room) -> Tuple[Point, Point, Point, Point]:
    left, right = room.x - 1, room.x + room.w
    top, bottom = room.y - 1, room.y + room.h
    return (left, top), (right, top), (left, bottom), (right, bottom)


def is_room_corner(x: int, y: int, room) -> bool:
    return (x, y) in ring_corners(room)


def axis_gap(a_start: int, a_len: int, b_start: int, b_len: int) -> int:
    """Empty cells between two spans on one axis; negative when they overlap."""
    return max(b_start - (a_start + a_len), a_start - (b_start + b_len))


class RoomCenterCache:
    """Room id -> (cx, cy), rebuilt once placement is finished."""

    def __init__(self):
        self._centers: List[Point] = []

    def rebuild(self, rooms: Sequence) -> None:
        self._centers = [(r.x + r.w // 2, r.y + r.h // 2) for r in rooms]

    def clear(self) -> None:
        self._centers = []

    def get(self, room_id: int) -> Point:
        return self._centers[room_id]

    def __len__(self) -> int:
        return len(self._centers)


class RoomDistanceCache:
    """Symmetric Manhattan distances between room centers, filled on demand."""

    def __init__(self, centers: RoomCenterCache):
        self._centers = centers
        self._matrix: Dict[Tuple[int, int], int] = {}

    def clear(self) -> None:
        self._matrix.clear()

    def get(self, i: int, j: int) -> int:
        if i == j:
            return 0
        key = (i, j) if i < j else (j, i)
        dist = self._matrix.get(key)
        if dist is None:
            dist = manhattan(self._centers.get(i), self._centers.get(j))
            self._matrix[key] = dist
        return dist

    def cached_pairs(self) -> int:
        return len(self._matrix)


def find_room_at(x: int, y: int, rooms: Sequence) -> Optional[int]:
    for idx, room in enumerate(rooms):
        if point_in_room(x, y, room):
            return idx
    return None
