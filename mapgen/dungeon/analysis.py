"""Read-only inspection of a generated map: counts, statistics, validation."""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Tuple

from .config import MAP_MARGIN, MIN_ROOM_DISTANCE
from .doors import rooms_owning_ring_cell
from .geometry import CARDINALS, axis_gap, is_room_corner, point_in_room
from .tiles import DOOR, DOWN_STAIRS, FLOOR, STAIRS, TILE_NAMES, UP_STAIRS, WALKABLE


def count_tiles(store, tile: int) -> int:
    return sum(1 for _x, _y, t in store.cells() if t == tile)


def find_tiles(store, tile: int, limit: int = 0) -> List[Tuple[int, int]]:
    """Positions holding ``tile`` in row-major order; ``limit`` 0 means all."""
    found = []
    for x, y, t in store.cells():
        if t == tile:
            found.append((x, y))
            if limit and len(found) >= limit:
                break
    return found


def map_statistics(gen) -> Dict[str, object]:
    counts = {name: 0 for name in TILE_NAMES.values()}
    for _x, _y, t in gen.store.cells():
        counts[TILE_NAMES[t]] += 1
    total = gen.width * gen.height
    walkable = sum(counts[TILE_NAMES[t]] for t in WALKABLE)
    return {
        "width": gen.width,
        "height": gen.height,
        "tiles": counts,
        "rooms": len(gen.rooms),
        "doors": counts["door"],
        "corridors": gen.corridor_count,
        "deception_corridors": len(gen.deception_paths),
        "hidden_rooms": len(gen.hidden_rooms),
        "niche_cells": len(gen.niche_cells),
        "floor_coverage_pct": round(100.0 * walkable / total, 2) if total else 0.0,
    }


def _floor_graph_connected(gen) -> bool:
    passable = {(x, y) for x, y, t in gen.store.cells() if t in WALKABLE} | set(gen.secret_doors)
    if not passable:
        return True
    start = next(iter(sorted(passable)))
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in CARDINALS:
            nxt = (x + dx, y + dy)
            if nxt in passable and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return len(seen) == len(passable)


def validate_map(gen) -> List[str]:
    """Return a description of every violated structural rule; [] when valid."""
    problems: List[str] = []
    rooms = gen.rooms
    w, h = gen.width, gen.height
    for idx, r in enumerate(rooms):
        if r.x < MAP_MARGIN or r.y < MAP_MARGIN or r.x + r.w + MAP_MARGIN > w or r.y + r.h + MAP_MARGIN > h:
            problems.append(f"room {idx} outside margin")
        for ix, iy in r.cells():
            if gen.store.get(ix, iy) not in (FLOOR,) + tuple(STAIRS):
                problems.append(f"room {idx} interior cell {(ix, iy)} not floor")
                break
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            a, b = rooms[i], rooms[j]
            if axis_gap(a.x, a.w, b.x, b.w) < MIN_ROOM_DISTANCE and axis_gap(a.y, a.h, b.y, b.h) < MIN_ROOM_DISTANCE:
                problems.append(f"rooms {i} and {j} too close")
    for x, y, t in gen.store.cells():
        if t == FLOOR:
            if (x, y) not in gen.corridor_cells and not any(point_in_room(x, y, r) for r in rooms):
                problems.append(f"stray floor at {(x, y)}")
        elif t == DOOR:
            owners = rooms_owning_ring_cell(x, y, rooms)
            if len(owners) != 1:
                problems.append(f"door at {(x, y)} on {len(owners)} room rings")
            elif is_room_corner(x, y, rooms[owners[0]]):
                problems.append(f"door at {(x, y)} on room corner")
    if not _floor_graph_connected(gen):
        problems.append("floor graph disconnected")
    ups = len(find_tiles(gen.store, UP_STAIRS))
    downs = len(find_tiles(gen.store, DOWN_STAIRS))
    if ups != 1 or downs != 1:
        problems.append(f"expected one up and one down stair, found {ups} and {downs}")
    return problems


__all__ = ["count_tiles", "find_tiles", "map_statistics", "validate_map"]
