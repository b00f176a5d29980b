"""Room connection: MST edge selection, corridor routing and wall integrity.

Routing strategy per MST edge (A, B):
  * pick an exit on each room's outer ring, on the side facing the other
    room (dominant axis of the centre delta), at the side midpoint
  * step one cell further out to an approach cell
  * join the two approach cells with an L; prefer the ordering that stays
    clear of every room interior and ring, horizontal-first on ties
  * when both L orderings would cut through a room, fall back to a
    breadth-first detour over cells outside every room ring

Corridor floor is only drawn on EMPTY cells; existing floor, doors and
stairs are left untouched.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..logging_utils import get_logger
from .config import MAX_PATH_LENGTH
from .doors import place_doors_for_path
from .errors import ConnectionFailure
from .geometry import CARDINALS, NEIGHBORS_8, Point, point_in_expanded
from .metrics import bump
from .tiles import EMPTY, FLOOR, WALKABLE, WALL

log = get_logger("mapgen.connector")


def build_mst(rooms: Sequence, distances) -> List[Tuple[int, int]]:
    """Prim's algorithm from room 0; ties go to the lower room id.

    Returns edges as (connected_room, new_room) and marks rooms connected.
    """
    if not rooms:
        return []
    for room in rooms:
        room.connected = False
        room.connections = 0
    rooms[0].connected = True
    edges: List[Tuple[int, int]] = []
    for _ in range(len(rooms) - 1):
        best = None
        for j, candidate in enumerate(rooms):
            if candidate.connected:
                continue
            for i, anchor in enumerate(rooms):
                if not anchor.connected:
                    continue
                dist = distances.get(i, j)
                if best is None or dist < best[0]:
                    best = (dist, i, j)
        _, i, j = best
        rooms[j].connected = True
        rooms[i].connections += 1
        rooms[j].connections += 1
        edges.append((i, j))
    return edges


def exit_direction(room, target: Point) -> Tuple[int, int]:
    cx, cy = room.center
    dx, dy = target[0] - cx, target[1] - cy
    if abs(dx) > abs(dy):
        return (1, 0) if dx > 0 else (-1, 0)
    return (0, 1) if dy > 0 else (0, -1)


def find_room_exit(room, target: Point) -> Point:
    """Point on the room's outer ring facing ``target``, at the side midpoint."""
    cx, cy = room.center
    step = exit_direction(room, target)
    if step == (1, 0):
        return (room.x + room.w, cy)
    if step == (-1, 0):
        return (room.x - 1, cy)
    if step == (0, 1):
        return (cx, room.y + room.h)
    return (cx, room.y - 1)


def side_exit(room, step: Tuple[int, int]) -> Point:
    cx, cy = room.center
    return find_room_exit(room, (cx + step[0] * 100, cy + step[1] * 100))


def l_path(start: Point, end: Point, horizontal_first: bool) -> List[Point]:
    (x0, y0), (x1, y1) = start, end
    sx = 1 if x1 >= x0 else -1
    sy = 1 if y1 >= y0 else -1
    cells = []
    if horizontal_first:
        cells.extend((x, y0) for x in range(x0, x1 + sx, sx))
        cells.extend((x1, y) for y in range(y0 + sy, y1 + sy, sy))
    else:
        cells.extend((x0, y) for y in range(y0, y1 + sy, sy))
        cells.extend((x, y1) for x in range(x0 + sx, x1 + sx, sx))
    return cells


def _join(*segments: Sequence[Point]) -> List[Point]:
    out: List[Point] = []
    for seg in segments:
        for cell in seg:
            if not out or out[-1] != cell:
                out.append(cell)
    return out


def path_crosses_room(path: Sequence[Point], rooms: Sequence) -> bool:
    """True when any cell but the two endpoints touches a room interior or ring."""
    for x, y in path[1:-1]:
        if any(point_in_expanded(x, y, r) for r in rooms):
            return True
    return len(set(path)) != len(path)


def detour_path(start: Point, end: Point, rooms: Sequence, width: int, height: int) -> Optional[List[Point]]:
    """Shortest 4-connected path between two cells, avoiding every room ring."""

    def free(x, y):
        if not (1 <= x <= width - 2 and 1 <= y <= height - 2):
            return False
        return not any(point_in_expanded(x, y, r) for r in rooms)

    if not (free(*start) and free(*end)):
        return None
    parents: Dict[Point, Optional[Point]] = {start: None}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        if cur == end:
            break
        for dx, dy in CARDINALS:
            nxt = (cur[0] + dx, cur[1] + dy)
            if nxt not in parents and free(*nxt):
                parents[nxt] = cur
                queue.append(nxt)
    if end not in parents:
        return None
    path = []
    node: Optional[Point] = end
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def route_corridor(gen, a: int, b: int) -> Optional[List[Point]]:
    """Compute the corridor path for MST edge (a, b); None when unroutable."""
    rooms = gen.rooms
    room_a, room_b = rooms[a], rooms[b]
    exit_a = find_room_exit(room_a, gen.centers.get(b))
    exit_b = find_room_exit(room_b, gen.centers.get(a))
    step_a = exit_direction(room_a, gen.centers.get(b))
    step_b = exit_direction(room_b, gen.centers.get(a))
    approach_a = (exit_a[0] + step_a[0], exit_a[1] + step_a[1])
    approach_b = (exit_b[0] + step_b[0], exit_b[1] + step_b[1])

    horizontal = _join([exit_a], l_path(approach_a, approach_b, True), [exit_b])
    if not path_crosses_room(horizontal, rooms):
        path = horizontal
    else:
        vertical = _join([exit_a], l_path(approach_a, approach_b, False), [exit_b])
        if not path_crosses_room(vertical, rooms):
            path = vertical
        else:
            middle = detour_path(approach_a, approach_b, rooms, gen.width, gen.height)
            if middle is None:
                return None
            path = _join([exit_a], middle, [exit_b])
            bump(gen, "route_detours")
            log.debug(event="route_detour", edge=f"{a}-{b}", length=len(path))
    if len(path) > MAX_PATH_LENGTH:
        return None
    return path


def draw_corridor(gen, path: Sequence[Point]) -> None:
    for x, y in path:
        if gen.store.get(x, y) == EMPTY:
            gen.store.set(x, y, FLOOR)
        gen.corridor_cells.add((x, y))


def emergency_corridor(gen, a: int, b: int) -> List[Point]:
    """Straight Manhattan line between room centres, drawn regardless of rooms."""
    start, end = gen.centers.get(a), gen.centers.get(b)
    path = _join(l_path(start, end, True))
    for x, y in path:
        if gen.store.get(x, y) in (EMPTY, WALL):
            gen.store.set(x, y, FLOOR)
            gen.corridor_cells.add((x, y))
    log.warn(event="emergency_corridor", rooms=f"{a}-{b}", seed=gen.seed)
    bump(gen, "emergency_corridors")
    return path


def place_walls(store, around: Optional[Iterable[Point]] = None) -> int:
    """Wall in every EMPTY cell touching walkable ground (8-neighbourhood).

    ``around`` limits the sweep to the given cells; default is the whole map.
    """
    added = 0
    targets: Set[Point] = set()
    if around is None:
        around = ((x, y) for x, y, tile in store.cells() if tile in WALKABLE)
    for x, y in around:
        if store.get(x, y) not in WALKABLE:
            continue
        for dx, dy in NEIGHBORS_8:
            nx, ny = x + dx, y + dy
            if store.in_bounds(nx, ny) and store.get(nx, ny) == EMPTY:
                targets.add((nx, ny))
    for x, y in targets:
        store.set(x, y, WALL)
        added += 1
    return added


def reachable_rooms(gen, passable_extra=()) -> Set[int]:
    """Room ids 4-reachable from room 0 over walkable tiles (plus extras)."""
    if not gen.rooms:
        return set()
    extra = set(passable_extra)
    store = gen.store
    start = gen.centers.get(0)
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in CARDINALS:
            nxt = (x + dx, y + dy)
            if nxt in seen:
                continue
            if store.get(*nxt) in WALKABLE or nxt in extra:
                seen.add(nxt)
                queue.append(nxt)
    return {idx for idx in range(len(gen.rooms)) if gen.centers.get(idx) in seen}


def connect_rooms(gen) -> int:
    """Run the connection phase; returns the number of MST corridors drawn."""
    edges = build_mst(gen.rooms, gen.distances)
    gen.mst_edges = edges
    failed: List[Tuple[int, int]] = []
    for a, b in edges:
        path = route_corridor(gen, a, b)
        if path is None:
            gen.rooms[b].connected = False
            failed.append((a, b))
            continue
        draw_corridor(gen, path)
        place_doors_for_path(gen.store, gen.rooms, path)
        gen.corridors.append(path)
    for _a, b in failed:
        # a failed edge cuts off b together with its whole MST subtree
        reached = reachable_rooms(gen)
        if b in reached:
            continue
        nearest = min(reached, key=lambda i: (gen.distances.get(i, b), i))
        gen.corridors.append(emergency_corridor(gen, nearest, b))
        gen.rooms[b].connected = True
    place_walls(gen.store)
    missing = set(range(len(gen.rooms))) - reachable_rooms(gen)
    if missing:
        raise ConnectionFailure(missing)
    return len(edges)


__all__ = [
    "build_mst",
    "connect_rooms",
    "detour_path",
    "draw_corridor",
    "emergency_corridor",
    "exit_direction",
    "find_room_exit",
    "l_path",
    "path_crosses_room",
    "place_walls",
    "reachable_rooms",
    "route_corridor",
    "side_exit",
]
