import pytest

from mapgen.dungeon.config import MapParameters, parameters_for, MapConfig, MapSize
from mapgen.dungeon.rng import Rng16
from mapgen.dungeon.rooms import (
    Room,
    assign_room_priorities,
    can_place_room,
    place_room,
    place_rooms,
    roll_room_size,
    shuffled_slots,
)
from mapgen.dungeon.tiles import EMPTY, FLOOR, TileStore


def test_shuffled_slots_is_permutation():
    rng = Rng16(99)
    slots = shuffled_slots(16, rng)
    assert sorted(slots) == list(range(16))
    assert shuffled_slots(16, Rng16(99)) == slots


def test_roll_room_size_bounds():
    rng = Rng16(5)
    params = MapParameters()
    rect = 0
    for _ in range(400):
        w, h = roll_room_size(params, rng)
        assert 4 <= w <= 8 and 4 <= h <= 8
        if w != h:
            rect += 1
    assert rect > 0


def test_can_place_room_margins():
    store = TileStore(64, 64)
    assert can_place_room(store, [], 3, 3, 4, 4)
    assert not can_place_room(store, [], 2, 3, 4, 4)
    assert not can_place_room(store, [], 3, 2, 4, 4)
    assert can_place_room(store, [], 56, 56, 4, 4)  # 56+4+3 = 63 < 64
    assert not can_place_room(store, [], 57, 3, 4, 4)


def test_can_place_room_spacing():
    store = TileStore(64, 64)
    rooms = []
    place_room(store, rooms, 10, 10, 4, 4)
    assert not can_place_room(store, rooms, 18, 10, 4, 4)  # gap 4
    assert can_place_room(store, rooms, 19, 10, 4, 4)  # gap 5
    assert not can_place_room(store, rooms, 12, 12, 4, 4)  # overlap


def test_place_room_writes_floor():
    store = TileStore(20, 20)
    rooms = []
    room = place_room(store, rooms, 4, 5, 4, 6)
    assert rooms == [room] and room.priority == 5
    for x, y, t in store.cells():
        inside = 4 <= x < 8 and 5 <= y < 11
        assert t == (FLOOR if inside else EMPTY)


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 999, 31337])
def test_place_rooms_invariants(seed):
    params = parameters_for(MapConfig(MapSize.MEDIUM))
    store = TileStore(params.map_width, params.map_height)
    rooms = place_rooms(store, params, Rng16(seed))
    assert 2 <= len(rooms) <= params.max_rooms
    for r in rooms:
        assert r.x >= 3 and r.y >= 3
        assert r.x + r.w + 3 <= params.map_width
        assert r.y + r.h + 3 <= params.map_height
        assert 4 <= r.w <= 8 and 4 <= r.h <= 8
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            gap_x = max(b.x - (a.x + a.w), a.x - (b.x + b.w))
            gap_y = max(b.y - (a.y + a.h), a.y - (b.y + b.h))
            assert gap_x >= 5 or gap_y >= 5


def test_place_rooms_too_small_map():
    params = MapParameters(map_width=8, map_height=8)
    store = TileStore(8, 8)
    assert place_rooms(store, params, Rng16(1)) == []
    assert all(t == EMPTY for _x, _y, t in store.cells())


def test_assign_room_priorities():
    rooms = [Room(0, 0, 4, 4) for _ in range(6)]
    assign_room_priorities(rooms, Rng16(3))
    assert rooms[0].priority == 10
    assert rooms[-1].priority == 8
    assert all(5 <= r.priority <= 7 for r in rooms[1:-1])
    single = [Room(0, 0, 4, 4)]
    assign_room_priorities(single, Rng16(3))
    assert single[0].priority == 10
