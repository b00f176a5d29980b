"""Stair placement: UP in the highest priority room, DOWN in the next.

Each stair goes on the room centre when it is FLOOR, else on the first FLOOR
cardinal neighbour inside the room, else on any interior FLOOR cell.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import PlacementShortfall
from .geometry import CARDINALS
from .tiles import DOWN_STAIRS, FLOOR, UP_STAIRS


def rooms_by_priority(rooms) -> List[int]:
    """Room ids, highest priority first; ties keep the lower id first."""
    return sorted(range(len(rooms)), key=lambda i: (-rooms[i].priority, i))


def _stair_cell(store, room) -> Optional[Tuple[int, int]]:
    cx, cy = room.center
    if store.get(cx, cy) == FLOOR:
        return (cx, cy)
    for dx, dy in CARDINALS:
        if room.x <= cx + dx < room.x + room.w and room.y <= cy + dy < room.y + room.h:
            if store.get(cx + dx, cy + dy) == FLOOR:
                return (cx + dx, cy + dy)
    for x, y in room.cells():
        if store.get(x, y) == FLOOR:
            return (x, y)
    return None


def place_stairs(gen) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Write UP_STAIRS in the top priority room and DOWN_STAIRS in the next."""
    if len(gen.rooms) < 2:
        raise PlacementShortfall(len(gen.rooms))
    order = rooms_by_priority(gen.rooms)
    placed = []
    for room_id, tile in ((order[0], UP_STAIRS), (order[1], DOWN_STAIRS)):
        cell = _stair_cell(gen.store, gen.rooms[room_id])
        if cell is None:
            raise PlacementShortfall(len(gen.rooms))
        gen.store.set(cell[0], cell[1], tile)
        placed.append(cell)
    gen.start_room, gen.end_room = order[0], order[1]
    gen.up_stairs, gen.down_stairs = placed
    return gen.up_stairs, gen.down_stairs
