"""Secret features layered over a connected map.

Three passes run in order, each scaled by its preset percentage:

  hidden rooms   doors of non start/end rooms become WALL (kept in
                 ``secret_doors`` so a seeker can find them again)
  niches         1x1 to 2x2 alcoves carved out of corridor walls
  deception      dead-end corridors leaving a room through a fresh door;
                 each trial scans the room sides in shuffled order

Every edit runs as a trial against a snapshot. The edit is kept only when
all rooms stay reachable from the start room, counting secret doors as
passable; otherwise the snapshot is restored. A target gets EDIT_TRIALS
trials before it is skipped.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from ..logging_utils import get_logger
from .config import EDIT_TRIALS, scaled_count
from .connector import place_walls, reachable_rooms, side_exit
from .geometry import CARDINALS, Point, point_in_expanded
from .metrics import bump
from .tiles import DOOR, EMPTY, FLOOR, STAIRS, WALKABLE, WALL

log = get_logger("mapgen.obfuscation")

DECEPTION_MARGIN = 2
MIN_DECEPTION_LENGTH = 3


def skeleton_intact(gen) -> bool:
    return len(reachable_rooms(gen, gen.secret_doors)) == len(gen.rooms)


def _trial(gen, edit: Callable) -> bool:
    saved = (
        gen.store.snapshot(),
        set(gen.corridor_cells),
        set(gen.niche_cells),
        set(gen.secret_doors),
        set(gen.hidden_rooms),
        len(gen.deception_paths),
    )
    if edit(gen) and skeleton_intact(gen):
        return True
    snapshot, corridor_cells, niche_cells, secret_doors, hidden_rooms, n_paths = saved
    gen.store.restore(snapshot)
    gen.corridor_cells = corridor_cells
    gen.niche_cells = niche_cells
    gen.secret_doors = secret_doors
    gen.hidden_rooms = hidden_rooms
    del gen.deception_paths[n_paths:]
    bump(gen, "rejected_edits")
    return False


def _run_targets(gen, label: str, target: int, edit: Callable) -> int:
    done = 0
    for _ in range(target):
        if any(_trial(gen, edit) for _attempt in range(EDIT_TRIALS)):
            done += 1
        else:
            log.debug(event="obfuscation_skipped", kind=label, seed=gen.seed)
    return done


def _near_any_room(gen, x: int, y: int) -> bool:
    return any(point_in_expanded(x, y, r) for r in gen.rooms)


# -- hidden rooms -----------------------------------------------------------


def _hide_room(gen) -> bool:
    last = len(gen.rooms) - 1
    candidates = [i for i in range(1, last) if i not in gen.hidden_rooms]
    if not candidates:
        return False
    idx = candidates[gen.rng.rnd(len(candidates))]
    doors = [(x, y) for x, y in gen.rooms[idx].ring() if gen.store.get(x, y) == DOOR]
    if not doors:
        return False
    for x, y in doors:
        gen.store.set(x, y, WALL)
        gen.secret_doors.add((x, y))
    expected = set(range(len(gen.rooms))) - gen.hidden_rooms - {idx}
    if not expected <= reachable_rooms(gen):
        return False
    gen.hidden_rooms.add(idx)
    return True


def add_hidden_rooms(gen) -> int:
    target = scaled_count(gen.params.hidden_percent, len(gen.rooms))
    return _run_targets(gen, "hidden_room", target, _hide_room)


# -- niches -----------------------------------------------------------------


def _niche_candidates(gen) -> List[tuple]:
    out = []
    for cx, cy in sorted(gen.corridor_cells):
        if gen.store.get(cx, cy) != FLOOR:
            continue
        for dx, dy in CARDINALS:
            wx, wy = cx + dx, cy + dy
            if gen.store.get(wx, wy) != WALL or (wx, wy) in gen.secret_doors:
                continue
            if _near_any_room(gen, wx, wy):
                continue
            out.append((wx, wy, dx, dy))
    return out


def _niche_cell_ok(gen, x: int, y: int) -> bool:
    if not (1 <= x <= gen.width - 2 and 1 <= y <= gen.height - 2):
        return False
    if gen.store.get(x, y) not in (WALL, EMPTY) or (x, y) in gen.secret_doors:
        return False
    if _near_any_room(gen, x, y):
        return False
    for dx, dy in CARDINALS:
        neighbor = gen.store.get(x + dx, y + dy)
        if neighbor == DOOR or neighbor in STAIRS:
            return False
    return True


def _carve_niche(gen) -> bool:
    candidates = _niche_candidates(gen)
    if not candidates:
        return False
    wx, wy, dx, dy = candidates[gen.rng.rnd(len(candidates))]
    depth = 1 + gen.rng.rnd(2)
    breadth = 1 + gen.rng.rnd(2)
    px, py = (dy, dx) if gen.rng.rnd(2) else (-dy, -dx)
    cells = [(wx + dx * i + px * j, wy + dy * i + py * j) for i in range(depth) for j in range(breadth)]
    if not all(_niche_cell_ok(gen, x, y) for x, y in cells):
        return False
    for x, y in cells:
        gen.store.set(x, y, FLOOR)
        gen.corridor_cells.add((x, y))
        gen.niche_cells.add((x, y))
    place_walls(gen.store, cells)
    return True


def add_niches(gen, corridor_count: int) -> int:
    target = scaled_count(gen.params.niche_percent, corridor_count)
    return _run_targets(gen, "niche", target, _carve_niche)


# -- deception corridors ----------------------------------------------------


def _side_cells(room, step) -> List[Point]:
    if step[0]:
        x = room.x + room.w if step[0] > 0 else room.x - 1
        return [(x, y) for y in range(room.y, room.y + room.h)]
    y = room.y + room.h if step[1] > 0 else room.y - 1
    return [(x, y) for x in range(room.x, room.x + room.w)]


def _side_has_door(gen, room, step) -> bool:
    return any(gen.store.get(x, y) == DOOR or (x, y) in gen.secret_doors for x, y in _side_cells(room, step))


def _deception_cell_ok(gen, cell: Point, prev: Point) -> bool:
    x, y = cell
    m = DECEPTION_MARGIN
    if not (m <= x <= gen.width - 1 - m and m <= y <= gen.height - 1 - m):
        return False
    if gen.store.get(x, y) != EMPTY or _near_any_room(gen, x, y):
        return False
    for dx, dy in CARDINALS:
        neighbor = (x + dx, y + dy)
        if neighbor == prev:
            continue
        if gen.store.get(*neighbor) in WALKABLE or neighbor in gen.secret_doors:
            return False
    return True


def _deception_route(gen, start: Point, step) -> List[Point]:
    rnd = gen.rng.rnd
    cells = []
    x, y = start
    for _ in range(5 + rnd(8)):
        x, y = x + step[0], y + step[1]
        cells.append((x, y))
    if rnd(2):
        turn = (step[1], step[0]) if rnd(2) else (-step[1], -step[0])
        for _ in range(2 + rnd(4)):
            x, y = x + turn[0], y + turn[1]
            cells.append((x, y))
    return cells


def _deception_candidates(gen) -> List[Tuple[int, Point]]:
    """Every (room, side) pair of the visible rooms, in seeded random order."""
    pairs = [(idx, step) for idx in range(len(gen.rooms)) if idx not in gen.hidden_rooms for step in CARDINALS]
    for i in range(len(pairs) - 1, 0, -1):
        j = gen.rng.rnd(i + 1)
        pairs[i], pairs[j] = pairs[j], pairs[i]
    return pairs


def _deception_path(gen, room, step) -> Optional[List[Point]]:
    if _side_has_door(gen, room, step):
        return None
    door = side_exit(room, step)
    if gen.store.get(*door) != WALL:
        return None
    accepted: List[Point] = []
    prev = door
    for cell in _deception_route(gen, door, step):
        if not _deception_cell_ok(gen, cell, prev):
            break
        accepted.append(cell)
        prev = cell
    if len(accepted) < MIN_DECEPTION_LENGTH:
        return None
    return [door] + accepted


def _plant_deception(gen) -> bool:
    for idx, step in _deception_candidates(gen):
        path = _deception_path(gen, gen.rooms[idx], step)
        if path is None:
            continue
        door, body = path[0], path[1:]
        gen.store.set(*door, DOOR)
        for x, y in body:
            gen.store.set(x, y, FLOOR)
            gen.corridor_cells.add((x, y))
        gen.deception_paths.append(path)
        place_walls(gen.store, path)
        return True
    return False


def add_deception_corridors(gen) -> int:
    target = scaled_count(gen.params.deception_percent, len(gen.rooms))
    return _run_targets(gen, "deception", target, _plant_deception)


__all__ = [
    "add_hidden_rooms",
    "add_niches",
    "add_deception_corridors",
    "skeleton_intact",
]
