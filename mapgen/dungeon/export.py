"""Binary export collaborators.

Packed map: the raw tile buffer, ceil(W*H*3/8) bytes, no header, row-major,
tile 0 in the low three bits of byte 0.

Seed file: 6 bytes, the seed as uint16 little-endian followed by one byte
each for the size, hidden-room, niche and deception presets.
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Tuple, Union

from .config import MapConfig
from .errors import ExportError, InvalidParameterError
from .tiles import TileStore, packed_size

PathLike = Union[str, Path]
SEED_RECORD = struct.Struct("<HBBBB")


def save_packed_map(gen, path: PathLike) -> int:
    data = gen.packed()
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise ExportError(path, exc.strerror or str(exc)) from exc
    return len(data)


def load_packed_map(path: PathLike, width: int, height: int) -> TileStore:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise ExportError(path, exc.strerror or str(exc)) from exc
    expected = packed_size(width, height)
    if len(data) != expected:
        raise ExportError(path, f"expected {expected} bytes for {width}x{height}, found {len(data)}")
    try:
        return TileStore.from_bytes(width, height, data)
    except ValueError as exc:
        raise ExportError(path, str(exc)) from exc


def save_seed_file(path: PathLike, seed: int, config: MapConfig) -> None:
    record = SEED_RECORD.pack(seed & 0xFFFF, *config.as_tuple())
    try:
        with open(path, "wb") as f:
            f.write(record)
    except OSError as exc:
        raise ExportError(path, exc.strerror or str(exc)) from exc


def load_seed_file(path: PathLike) -> Tuple[int, MapConfig]:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise ExportError(path, exc.strerror or str(exc)) from exc
    if len(data) != SEED_RECORD.size:
        raise ExportError(path, f"seed file must be {SEED_RECORD.size} bytes, found {len(data)}")
    seed, *presets = SEED_RECORD.unpack(data)
    try:
        config = MapConfig.from_values(*presets)
    except InvalidParameterError as exc:
        raise ExportError(path, str(exc)) from exc
    return seed, config
