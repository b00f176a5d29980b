from mapgen.dungeon import EMPTY, FLOOR, UP_STAIRS, Generator, MapConfig
from mapgen.dungeon.analysis import count_tiles, find_tiles, map_statistics, validate_map


def _generated(seed=42, size="small"):
    gen = Generator(seed=seed, config=MapConfig(size, "med", "med", "med"))
    assert gen.generate() == 1
    return gen


def test_counts_match_scan():
    gen = _generated()
    assert count_tiles(gen.store, UP_STAIRS) == 1
    floors = find_tiles(gen.store, FLOOR)
    assert len(floors) == count_tiles(gen.store, FLOOR)
    assert find_tiles(gen.store, FLOOR, limit=3) == floors[:3]


def test_statistics_shape():
    gen = _generated()
    stats = map_statistics(gen)
    assert stats["width"] == 48 and stats["height"] == 48
    assert sum(stats["tiles"].values()) == 48 * 48
    assert stats["rooms"] == gen.room_count
    assert stats["corridors"] == gen.room_count - 1
    assert stats["deception_corridors"] == gen.deception_count
    assert 0 < stats["floor_coverage_pct"] < 100


def test_valid_map_has_no_problems():
    assert validate_map(_generated(seed=7, size="medium")) == []


def test_stray_floor_reported():
    gen = _generated()
    x, y = find_tiles(gen.store, EMPTY, limit=1)[0]
    gen.set_map_tile(x, y, FLOOR)
    problems = validate_map(gen)
    assert f"stray floor at {(x, y)}" in problems
    assert "floor graph disconnected" in problems


def test_missing_stairs_reported():
    gen = _generated()
    gen.set_map_tile(*gen.up_stairs, FLOOR)
    assert any(p.startswith("expected one up and one down stair") for p in validate_map(gen))
