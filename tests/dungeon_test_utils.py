from collections import deque

# Tile codes duplicated lightly for test independence.
EMPTY = 0
WALL = 1
FLOOR = 2
DOOR = 3
UP = 4
DOWN = 5
WALKABLE = {FLOOR, DOOR, UP, DOWN}


def grid_of(gen):
    """Return the map as grid[x][y] of tile codes."""
    return [[gen.get_map_tile(x, y) for y in range(gen.height)] for x in range(gen.width)]


def first_room_center(gen):
    """Return (x,y) center of the first placed room if any, else None."""
    if not gen.rooms:
        return None
    r0 = gen.rooms[0]
    return (r0.x + r0.w // 2, r0.y + r0.h // 2)


def bfs_reachable(grid, start, extra=()):
    """Return set of (x,y) tiles reachable from start over WALKABLE (plus extra cells)."""
    if start is None:
        return set()
    extra = set(extra)
    w = len(grid)
    h = len(grid[0])
    sx, sy = start
    if not (0 <= sx < w and 0 <= sy < h):
        return set()
    if grid[sx][sy] not in WALKABLE and start not in extra:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < w and 0 <= ny < h and (nx, ny) not in vis:
                if grid[nx][ny] in WALKABLE or (nx, ny) in extra:
                    vis.add((nx, ny))
                    q.append((nx, ny))
    return vis


def iter_tiles(grid, tile):
    w = len(grid)
    h = len(grid[0])
    for x in range(w):
        for y in range(h):
            if grid[x][y] == tile:
                yield x, y


def in_interior(room, x, y):
    return room.x <= x < room.x + room.w and room.y <= y < room.y + room.h


def on_ring(room, x, y):
    inside_grown = room.x - 1 <= x <= room.x + room.w and room.y - 1 <= y <= room.y + room.h
    return inside_grown and not in_interior(room, x, y)


def ring_corners(room):
    l, r = room.x - 1, room.x + room.w
    t, b = room.y - 1, room.y + room.h
    return {(l, t), (r, t), (l, b), (r, b)}


def walkable_neighbors(grid, x, y):
    w = len(grid)
    h = len(grid[0])
    count = 0
    for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
        nx, ny = x + dx, y + dy
        if 0 <= nx < w and 0 <= ny < h and grid[nx][ny] in WALKABLE:
            count += 1
    return count
