from __future__ import annotations

from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms': 0,
        'corridor_count': 0,
        'deception_corridors': 0,
        'niches': 0,
        'hidden_rooms': 0,
        'doors': 0,
        'route_detours': 0,
        'emergency_corridors': 0,
        'rejected_edits': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }


def bump(gen, key: str, amount: int = 1) -> None:
    """Increment a counter; a no-op when the generator has metrics disabled."""
    if gen.enable_metrics:
        gen.metrics[key] = gen.metrics.get(key, 0) + amount
