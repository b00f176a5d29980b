"""Room placement on a coarse slot grid.

The map is split into ``grid_size x grid_size`` slots. Slot order is
shuffled (Fisher-Yates plus two adjacent-swap passes), then each slot gets at
most one room, anchored at the slot centre and optionally jittered.

Invariants after ``place_rooms``:
  * every room interior lies inside [3, W-4] x [3, H-4]
  * rooms never overlap and keep a gap of at least MIN_ROOM_DISTANCE+1 empty
    cells on at least one axis
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .config import MAP_MARGIN, MIN_ROOM_DISTANCE, PLACEMENT_RETRIES, MapParameters
from .geometry import axis_gap, ring_corners
from .tiles import EMPTY, FLOOR

START_PRIORITY = 10
END_PRIORITY = 8
DEFAULT_PRIORITY = 5


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int
    priority: int = DEFAULT_PRIORITY
    connected: bool = False
    connections: int = 0

    def cells(self):
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    def ring(self):
        """Outer ring cells, clockwise from the top-left corner."""
        left, right = self.x - 1, self.x + self.w
        top, bottom = self.y - 1, self.y + self.h
        for ix in range(left, right + 1):
            yield ix, top
        for iy in range(top + 1, bottom + 1):
            yield right, iy
        for ix in range(right - 1, left - 1, -1):
            yield ix, bottom
        for iy in range(bottom - 1, top, -1):
            yield left, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def corners(self):
        return ring_corners(self)


def shuffled_slots(count: int, rng) -> List[int]:
    slots = list(range(count))
    for i in range(count - 1, 0, -1):
        j = rng.rnd(i + 1)
        slots[i], slots[j] = slots[j], slots[i]
    for _ in range(2):
        for i in range(count - 1):
            if rng.rnd(2):
                slots[i], slots[i + 1] = slots[i + 1], slots[i]
    return slots


def roll_room_size(params: MapParameters, rng) -> Tuple[int, int]:
    lo, hi = params.min_room_size, params.max_room_size
    if hi > lo and rng.rnd(100) < 60:
        long_side = lo + 1 + rng.rnd(hi - lo)
        short_side = lo + rng.rnd(hi - lo)
        if rng.rnd(2):
            return short_side, long_side
        return long_side, short_side
    w = lo + rng.rnd(hi - lo + 1)
    h = lo + rng.rnd(hi - lo + 1)
    return w, h


def can_place_room(store, rooms: List[Room], x: int, y: int, w: int, h: int) -> bool:
    width, height = store.width, store.height
    if x < MAP_MARGIN or y < MAP_MARGIN:
        return False
    if x + w + MAP_MARGIN >= width or y + h + MAP_MARGIN >= height:
        return False
    d = MIN_ROOM_DISTANCE
    for iy in range(max(0, y - d), min(height - 1, y + h + d) + 1):
        for ix in range(max(0, x - d), min(width - 1, x + w + d) + 1):
            if store.get(ix, iy) != EMPTY:
                return False
    for r in rooms:
        if axis_gap(x, w, r.x, r.w) < d + 1 and axis_gap(y, h, r.y, r.h) < d + 1:
            return False
    return True


def place_room(store, rooms: List[Room], x: int, y: int, w: int, h: int) -> Room:
    room = Room(x, y, w, h)
    for ix, iy in room.cells():
        store.set(ix, iy, FLOOR)
    rooms.append(room)
    return room


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _candidate_origin(slot: int, w: int, h: int, params: MapParameters, rng, jitter: bool) -> Tuple[int, int]:
    grid = params.grid_size
    cell_w = params.map_width // grid
    cell_h = params.map_height // grid
    gx, gy = slot % grid, slot // grid
    x = gx * cell_w + (cell_w - w) // 2
    y = gy * cell_h + (cell_h - h) // 2
    if jitter:
        x += rng.rnd(9) - 4
        y += rng.rnd(9) - 4
    x = _clamp(x, MAP_MARGIN, params.map_width - w - MAP_MARGIN - 1)
    y = _clamp(y, MAP_MARGIN, params.map_height - h - MAP_MARGIN - 1)
    return x, y


def place_rooms(store, params: MapParameters, rng) -> List[Room]:
    """Fill slots with rooms; returns the room table (possibly short)."""
    rooms: List[Room] = []
    for slot in shuffled_slots(params.grid_size * params.grid_size, rng):
        if len(rooms) >= params.max_rooms:
            break
        w, h = roll_room_size(params, rng)
        jitter = rng.rnd(2) == 1
        for _attempt in range(PLACEMENT_RETRIES + 1):
            x, y = _candidate_origin(slot, w, h, params, rng, jitter)
            if can_place_room(store, rooms, x, y, w, h):
                place_room(store, rooms, x, y, w, h)
                break
            jitter = True
    return rooms


def assign_room_priorities(rooms: List[Room], rng) -> None:
    """Room 0 is the start (10), the last room the end (8), others 5..7."""
    if not rooms:
        return
    last = len(rooms) - 1
    for idx, room in enumerate(rooms):
        if idx == 0:
            room.priority = START_PRIORITY
        elif idx == last:
            room.priority = END_PRIORITY
        else:
            room.priority = DEFAULT_PRIORITY + rng.rnd(3)


__all__ = [
    "Room",
    "place_rooms",
    "place_room",
    "can_place_room",
    "roll_room_size",
    "shuffled_slots",
    "assign_room_priorities",
]
