"""Structural invariants checked over a spread of seeds and presets."""
import pytest

from mapgen.dungeon import Generator, MapConfig, validate_map
from tests.dungeon_test_utils import (
    DOOR,
    DOWN,
    FLOOR,
    UP,
    WALKABLE,
    bfs_reachable,
    grid_of,
    in_interior,
    iter_tiles,
    on_ring,
    ring_corners,
)

SEEDS = [1, 7, 42, 43, 1001, 4242, 65535]
CONFIGS = [
    MapConfig("small", "low", "low", "low"),
    MapConfig("medium", "med", "med", "med"),
    MapConfig("large", "high", "high", "high"),
]


@pytest.fixture(scope="module", params=[(s, c) for s in SEEDS for c in CONFIGS], ids=lambda p: f"{p[0]}-{p[1].as_tuple()}")
def generated(request):
    seed, config = request.param
    gen = Generator(seed=seed, config=config)
    assert gen.generate() == 1, gen.last_error
    return gen


@pytest.mark.structure
def test_rooms_inside_margin(generated):
    for r in generated.rooms:
        assert 3 <= r.x and r.x + r.w + 3 <= generated.width
        assert 3 <= r.y and r.y + r.h + 3 <= generated.height


@pytest.mark.structure
def test_rooms_spaced(generated):
    rooms = generated.rooms
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            gap_x = max(b.x - (a.x + a.w), a.x - (b.x + b.w))
            gap_y = max(b.y - (a.y + a.h), a.y - (b.y + b.h))
            assert gap_x >= 4 or gap_y >= 4


@pytest.mark.structure
def test_room_interiors_are_floor(generated):
    for r in generated.rooms:
        for x, y in r.cells():
            assert generated.get_map_tile(x, y) in (FLOOR, UP, DOWN)


@pytest.mark.structure
def test_floor_only_in_rooms_or_corridors(generated):
    grid = grid_of(generated)
    for x, y in iter_tiles(grid, FLOOR):
        assert (x, y) in generated.corridor_cells or any(in_interior(r, x, y) for r in generated.rooms), (x, y)


@pytest.mark.structure
def test_doors_on_single_ring_off_corner(generated):
    grid = grid_of(generated)
    for x, y in iter_tiles(grid, DOOR):
        owners = [r for r in generated.rooms if on_ring(r, x, y)]
        assert len(owners) == 1, (x, y)
        assert (x, y) not in ring_corners(owners[0])


@pytest.mark.structure
def test_floor_graph_connected(generated):
    grid = grid_of(generated)
    walkable = {(x, y) for x in range(generated.width) for y in range(generated.height) if grid[x][y] in WALKABLE}
    start = generated.up_stairs
    seen = bfs_reachable(grid, start, extra=generated.secret_doors)
    assert walkable <= seen


@pytest.mark.structure
def test_exactly_one_of_each_stair(generated):
    grid = grid_of(generated)
    assert len(list(iter_tiles(grid, UP))) == 1
    assert len(list(iter_tiles(grid, DOWN))) == 1


@pytest.mark.structure
def test_validate_map_agrees(generated):
    assert validate_map(generated) == []


@pytest.mark.parametrize("config", CONFIGS, ids=lambda c: str(c.as_tuple()))
def test_determinism_byte_for_byte(config):
    a = Generator(seed=4242, config=config)
    b = Generator(seed=4242, config=config)
    assert a.generate() == b.generate() == 1
    assert a.packed() == b.packed()
    first = a.packed()
    a.generate()
    assert a.packed() == first
