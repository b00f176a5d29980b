"""Door placement rules at room boundaries.

A door may only sit on a room's outer ring, and never on one of the ring's
four exact corners. Rings of distinct rooms never touch because of placement
spacing, so a valid door belongs to exactly one room.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .geometry import CARDINALS, NEIGHBORS_8, Point, is_room_corner, point_in_room, point_on_ring
from .tiles import DOOR


def adjacent_to_interior(x: int, y: int, rooms: Sequence) -> bool:
    """4-neighbourhood contact with any room interior."""
    for dx, dy in CARDINALS:
        nx, ny = x + dx, y + dy
        if any(point_in_room(nx, ny, r) for r in rooms):
            return True
    return False


def is_corner_cell(x: int, y: int, rooms: Sequence) -> bool:
    """Diagonal contact with a room interior and no cardinal contact."""
    if adjacent_to_interior(x, y, rooms):
        return False
    for dx, dy in NEIGHBORS_8[4:]:
        if any(point_in_room(x + dx, y + dy, r) for r in rooms):
            return True
    return False


def rooms_owning_ring_cell(x: int, y: int, rooms: Sequence) -> List[int]:
    return [idx for idx, r in enumerate(rooms) if point_on_ring(x, y, r)]


def is_valid_room_wall_for_door(x: int, y: int, rooms: Sequence) -> bool:
    owners = rooms_owning_ring_cell(x, y, rooms)
    if not owners:
        return False
    return not any(is_room_corner(x, y, rooms[idx]) for idx in owners)


def _door_from_scan(store, rooms: Sequence, path: Sequence[Point]) -> Optional[Point]:
    for i, (x, y) in enumerate(path):
        if not adjacent_to_interior(x, y, rooms):
            continue
        # a single step past a corner, never more
        if is_corner_cell(x, y, rooms) and i + 1 < len(path):
            x, y = path[i + 1]
        if store.get(x, y) != DOOR and is_valid_room_wall_for_door(x, y, rooms):
            store.set(x, y, DOOR)
            return (x, y)
        return None
    return None


def place_doors_for_path(store, rooms: Sequence, path: Sequence[Point]) -> List[Point]:
    """Place up to two doors: scanning from the head, then from the tail."""
    placed = []
    head = _door_from_scan(store, rooms, path)
    if head is not None:
        placed.append(head)
    tail = _door_from_scan(store, rooms, list(reversed(path)))
    if tail is not None:
        placed.append(tail)
    return placed


def doors_on_ring(store, room) -> List[Point]:
    return [(x, y) for x, y in room.ring() if store.get(x, y) == DOOR]


__all__ = [
    "adjacent_to_interior",
    "is_corner_cell",
    "is_valid_room_wall_for_door",
    "place_doors_for_path",
    "doors_on_ring",
    "rooms_owning_ring_cell",
]
