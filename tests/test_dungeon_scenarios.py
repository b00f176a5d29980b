import math
import unittest

from mapgen.dungeon import Generator, MapConfig, MapParameters
from mapgen.dungeon.api import (
    get_room_count,
    mapgen_generate_dungeon,
    mapgen_set_parameters,
)
from tests.dungeon_test_utils import DOWN, UP, bfs_reachable, grid_of, iter_tiles


class TestScenarios(unittest.TestCase):
    def test_minimal_small_low(self):
        gen = Generator(seed=1, config=MapConfig("small", "low", "low", "low"))
        self.assertEqual(gen.generate(), 1)
        self.assertGreaterEqual(gen.room_count, 2)
        grid = grid_of(gen)
        seen = bfs_reachable(grid, gen.up_stairs, extra=gen.secret_doors)
        for r in gen.rooms:
            self.assertIn(r.center, seen)
        self.assertEqual(len(list(iter_tiles(grid, UP))), 1)
        self.assertEqual(len(list(iter_tiles(grid, DOWN))), 1)

    def test_same_seed_same_buffer(self):
        a = Generator(seed=42)
        b = Generator(seed=42)
        a.generate()
        b.generate()
        self.assertEqual(a.packed(), b.packed())

    def test_different_seed_different_buffer(self):
        a = Generator(seed=42)
        b = Generator(seed=43)
        a.generate()
        b.generate()
        self.assertNotEqual(a.packed(), b.packed())

    def test_sparse_medium_corridors_form_a_tree(self):
        gen = Generator(seed=42, config=MapConfig("medium", "low", "low", "low"))
        self.assertEqual(gen.generate(), 1)
        self.assertEqual(gen.corridor_count, gen.room_count - 1)
        self.assertEqual(len(gen.mst_edges), gen.room_count - 1)
        self.assertEqual(gen.metrics["corridor_count"], gen.room_count - 1)
        # deception corridors are tracked apart from the spanning tree
        mst_cells = {c for path in gen.corridors for c in path}
        for path in gen.deception_paths:
            self.assertTrue(mst_cells.isdisjoint(path))

    def test_dense_large_high(self):
        gen = Generator(seed=42, config=MapConfig("large", "high", "high", "high"))
        self.assertEqual(gen.generate(), 1)
        target = math.ceil(0.5 * gen.room_count)
        self.assertGreaterEqual(gen.deception_count, 1)
        self.assertLessEqual(gen.deception_count, target)
        self.assertEqual(gen.metrics["deception_corridors"], gen.deception_count)
        self.assertEqual(gen.corridor_count, gen.room_count - 1)
        seen = bfs_reachable(grid_of(gen), gen.up_stairs, extra=gen.secret_doors)
        for r in gen.rooms:
            self.assertIn(r.center, seen)

    def test_dense_deception_tracks_half_the_rooms(self):
        planted = wanted = 0
        for seed in range(1, 11):
            gen = Generator(seed=seed, config=MapConfig("large", "high", "high", "high"))
            self.assertEqual(gen.generate(), 1)
            target = math.ceil(0.5 * gen.room_count)
            self.assertLessEqual(gen.deception_count, target)
            planted += gen.deception_count
            wanted += target
        self.assertGreaterEqual(planted / wanted, 0.75)

    def test_map_too_small_fails(self):
        gen = Generator(seed=1, params=MapParameters(map_width=8, map_height=8))
        self.assertEqual(gen.generate(), 0)
        self.assertEqual(gen.rooms, [])
        self.assertEqual(type(gen.last_error).__name__, "PlacementShortfall")

    def test_map_too_small_through_process_api(self):
        mapgen_set_parameters(MapParameters(map_width=8, map_height=8))
        self.assertEqual(mapgen_generate_dungeon(), 0)
        self.assertEqual(get_room_count(), 0)


if __name__ == "__main__":
    unittest.main()
