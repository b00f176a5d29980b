"""Generation orchestrator.

``Generator`` owns every piece of state for one generation: the packed tile
store, the room table, the centre and distance caches, corridor bookkeeping
and the RNG. ``generate()`` wipes all of it and runs the phases in order:

    rooms -> connections -> hidden rooms -> niches -> deception -> stairs

It returns 1 on success and 0 when too few rooms fit or a room cannot be
connected. A later ``generate()`` replaces all prior state.
"""
from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ..logging_utils import get_logger
from .config import MapConfig, MapParameters, parameters_for, validate_and_adjust
from .connector import connect_rooms
from .errors import ConnectionFailure, InvalidParameterError, PlacementShortfall
from .geometry import RoomCenterCache, RoomDistanceCache, coords_in_bounds, find_room_at, point_in_room
from .metrics import init_metrics
from .obfuscation import add_deception_corridors, add_hidden_rooms, add_niches
from .rng import Rng16, init_rnd
from .rooms import Room, assign_room_priorities, place_rooms
from .stairs import place_stairs
from .tiles import DOOR, TileStore

log = get_logger("mapgen.pipeline")

PROGRESS_STEPS = (
    ("Building Rooms", 20),
    ("Connecting Rooms", 45),
    ("Hidden Rooms", 60),
    ("Niches", 70),
    ("Deception Corridors", 80),
    ("Placing Stairs", 95),
    ("Generation Complete", 100),
)

_ENV_CONFIG_KEYS = {
    "MAPGEN_SIZE": "map_size",
    "MAPGEN_HIDDEN": "hidden_rooms",
    "MAPGEN_NICHES": "niches",
    "MAPGEN_DECEPTION": "deception",
}


def _flag(value) -> bool:
    return str(value).strip().lower() not in {"0", "false", "no", ""}


@dataclass
class Generator:
    seed: Optional[int] = None
    config: Optional[MapConfig] = None
    params: Optional[MapParameters] = None
    progress: Optional[Callable[[str, int], None]] = None
    enable_metrics: Optional[bool] = None

    def __post_init__(self):
        overrides: Dict[str, Any] = {}
        for env_key, attr in _ENV_CONFIG_KEYS.items():
            if env_key in os.environ:
                overrides[attr] = os.environ[env_key]
        metrics_flag = os.environ.get("MAPGEN_ENABLE_METRICS")
        # Flask app config wins over the environment inside a request
        from flask import current_app, has_app_context

        if has_app_context():
            cfg = current_app.config
            for key, attr in _ENV_CONFIG_KEYS.items():
                if key in cfg:
                    overrides[attr] = cfg[key]
            if "MAPGEN_ENABLE_METRICS" in cfg:
                metrics_flag = cfg["MAPGEN_ENABLE_METRICS"]
        if self.enable_metrics is None:
            self.enable_metrics = True if metrics_flag is None else _flag(metrics_flag)
        if self.config is None:
            self.config = MapConfig(**overrides)
        if self.params is None:
            self.params = parameters_for(self.config)
        else:
            self.params = validate_and_adjust(self.params)

        self.reseed = self.seed is None
        self.rng: Rng16 = init_rnd(self.seed)
        self.seed = self.rng.seed
        self.store = TileStore(self.params.map_width, self.params.map_height)
        self.rooms: List[Room] = []
        self.centers = RoomCenterCache()
        self.distances = RoomDistanceCache(self.centers)
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self.last_error: Optional[Exception] = None
        self.generated = False
        self._reset_state()

    # -- seed & parameters -------------------------------------------------

    def init(self, seed: Optional[int] = None) -> int:
        """Use ``seed`` for following generations; None reseeds randomly."""
        if seed is None:
            self.reseed = True
        else:
            self.reseed = False
            self.rng.reseed(seed)
            self.seed = self.rng.seed
        return self.seed

    def reset_seed_flag(self) -> None:
        """Draw a fresh random seed at the next generation."""
        self.reseed = True

    def set_parameters(self, config) -> MapParameters:
        if isinstance(config, MapParameters):
            self.params = validate_and_adjust(config)
        elif isinstance(config, MapConfig):
            self.config = config
            self.params = parameters_for(config)
        else:
            raise InvalidParameterError(f"expected MapConfig or MapParameters, got {type(config).__name__}")
        return self.params

    @property
    def width(self) -> int:
        return self.params.map_width

    @property
    def height(self) -> int:
        return self.params.map_height

    @property
    def map_size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # -- generation ----------------------------------------------------------

    def _reset_state(self):
        if (self.store.width, self.store.height) != self.map_size:
            self.store = TileStore(self.width, self.height)
        else:
            self.store.clear()
        self.rooms = []
        self.centers.clear()
        self.distances.clear()
        self.corridor_cells: Set[Tuple[int, int]] = set()
        self.niche_cells: Set[Tuple[int, int]] = set()
        self.secret_doors: Set[Tuple[int, int]] = set()
        self.hidden_rooms: Set[int] = set()
        self.corridors: List[List[Tuple[int, int]]] = []
        self.deception_paths: List[List[Tuple[int, int]]] = []
        self.mst_edges: List[Tuple[int, int]] = []
        self.corridor_count = 0
        self.niche_count = 0
        self.start_room: Optional[int] = None
        self.end_room: Optional[int] = None
        self.up_stairs: Optional[Tuple[int, int]] = None
        self.down_stairs: Optional[Tuple[int, int]] = None
        if self.enable_metrics:
            self.metrics = init_metrics()

    def generate(self) -> int:
        self._reset_state()
        self.last_error = None
        self.generated = False
        if self.reseed:
            self.rng = init_rnd()
        else:
            self.rng.reset()
        self.seed = self.rng.seed
        log.info(event="generation_start", seed=self.seed, width=self.width, height=self.height,
                 max_rooms=self.params.max_rooms)
        try:
            self._run_pipeline()
        except (PlacementShortfall, ConnectionFailure) as exc:
            self.last_error = exc
            log.warn(event="generation_failed", seed=self.seed, reason=str(exc), rooms=len(self.rooms))
            return 0
        self.generated = True
        log.info(event="generation_complete", seed=self.seed, rooms=len(self.rooms),
                 corridors=self.corridor_count, runtime_ms=self.metrics.get("runtime_ms"))
        return 1

    def _report(self, step: int):
        label, percent = PROGRESS_STEPS[step]
        log.debug(event="progress", phase=label, percent=percent)
        if self.progress is not None:
            self.progress(label, percent)

    def _build_rooms(self):
        self.rooms = place_rooms(self.store, self.params, self.rng)
        if len(self.rooms) < 2:
            raise PlacementShortfall(len(self.rooms))
        assign_room_priorities(self.rooms, self.rng)
        self.centers.rebuild(self.rooms)

    def _run_pipeline(self):
        """Execute the ordered phases, timing each into ``metrics['phase_ms']``."""
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        _phase("place_rooms", self._build_rooms)
        self._report(0)
        self.corridor_count = _phase("connect_rooms", connect_rooms, self)
        self._report(1)
        hidden = _phase("hidden_rooms", add_hidden_rooms, self)
        self._report(2)
        self.niche_count = _phase("niches", add_niches, self, self.corridor_count)
        self._report(3)
        deception = _phase("deception", add_deception_corridors, self)
        self._report(4)
        _phase("stairs", place_stairs, self)
        self._report(5)

        if self.enable_metrics:
            end = time.perf_counter()
            self.metrics["rooms"] = len(self.rooms)
            self.metrics["corridor_count"] = self.corridor_count
            self.metrics["hidden_rooms"] = hidden
            self.metrics["niches"] = self.niche_count
            self.metrics["deception_corridors"] = deception
            self.metrics["doors"] = sum(1 for _x, _y, t in self.store.cells() if t == DOOR)
            self.metrics["runtime_ms"] = int((end - start) * 1000)
            self.metrics["phase_ms"] = phase_times
        self._report(6)

    @property
    def deception_count(self) -> int:
        return len(self.deception_paths)

    # -- tile-access API -----------------------------------------------------

    def get_map_tile(self, x: int, y: int) -> int:
        return self.store.get(x, y)

    def set_map_tile(self, x: int, y: int, tile: int) -> None:
        self.store.set(x, y, tile)

    def coords_in_bounds(self, x: int, y: int) -> bool:
        return coords_in_bounds(x, y, self.width, self.height)

    def point_in_room(self, x: int, y: int, room_id: int) -> bool:
        if not 0 <= room_id < len(self.rooms):
            return False
        return point_in_room(x, y, self.rooms[room_id])

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    def get_room(self, room_id: int) -> Room:
        return self.rooms[room_id]

    def get_room_center(self, room_id: int) -> Tuple[int, int]:
        return self.centers.get(room_id)

    def find_room_at(self, x: int, y: int) -> Optional[int]:
        return find_room_at(x, y, self.rooms)

    def get_start_room(self) -> Optional[int]:
        return self.start_room

    def get_end_room(self) -> Optional[int]:
        return self.end_room

    def packed(self) -> bytes:
        return self.store.to_bytes()


def generate_map(seed: Optional[int] = None, config: Optional[MapConfig] = None, **kwargs) -> Generator:
    """Build a Generator, run it once and return it whatever the outcome."""
    gen = Generator(seed=seed, config=config, **kwargs)
    gen.generate()
    return gen


__all__ = ["Generator", "generate_map", "PROGRESS_STEPS"]
