"""Exception taxonomy for map generation.

Out-of-bounds tile access is deliberately absent here: reads return EMPTY and
writes are dropped, so geometry code never needs to guard the map edge.
"""


class MapgenError(Exception):
    """Base class for every generation error."""


class InvalidParameterError(MapgenError, ValueError):
    """A preset or parameter is outside its accepted range."""


class PlacementShortfall(MapgenError):
    """The room placer produced fewer than two rooms."""

    def __init__(self, placed: int):
        super().__init__(f"only {placed} room(s) placed, need at least 2")
        self.placed = placed


class ConnectionFailure(MapgenError):
    """A room stayed unreachable even after the emergency corridor."""

    def __init__(self, room_ids):
        ids = sorted(room_ids)
        super().__init__(f"rooms unreachable after emergency fallback: {ids}")
        self.room_ids = ids


class ExportError(MapgenError):
    """A map or seed file could not be read or written."""

    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


__all__ = [
    "MapgenError",
    "InvalidParameterError",
    "PlacementShortfall",
    "ConnectionFailure",
    "ExportError",
]
