"""Seed coercion API.

Turns whatever the client sends (int, digit string, free text, nothing) into
the 16-bit seed the generator actually uses.
"""
import hashlib
import random

from flask import Blueprint, jsonify, request

from mapgen.dungeon.rng import normalize_seed

bp_seed = Blueprint("seed_api", __name__)


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a non-zero 16-bit seed."""
    if payload_seed is None:
        return random.randint(1, 0xFFFF)
    if isinstance(payload_seed, bool):
        raise ValueError("seed must be an integer or string")
    if isinstance(payload_seed, int):
        return normalize_seed(payload_seed)
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 0xFFFF)
        if s.isdigit():
            return normalize_seed(int(s))
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return normalize_seed(int.from_bytes(h[:2], "big"))
    raise ValueError("seed must be an integer or string")


@bp_seed.route("/api/dungeon/seed", methods=["POST"])
def set_seed():
    """Resolve a seed.

    Body JSON (all optional): { "seed": <int|str|null> }
    Response: { "seed": <int> } or 400 for unsupported seed types.
    """
    data = request.get_json(silent=True) or {}
    try:
        seed = _coerce_seed(data.get("seed"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"seed": seed})
