"""
project: mapgen
module: __init__.py
License: MIT

Flask application factory for the dungeon generation service.

Configuration comes from environment variables (optionally loaded from a
local .env file) and can be overridden per app via ``app.config``. The
``instance/`` directory holds runtime files such as the rotating log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so MAPGEN_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

_CONFIG_KEYS = ("MAPGEN_SIZE", "MAPGEN_HIDDEN", "MAPGEN_NICHES", "MAPGEN_DECEPTION")


def create_app(overrides=None) -> Flask:
    """Build the Flask app, register blueprints and apply config overrides."""
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # read-only checkouts still serve requests; only file logging is lost
        pass

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        MAPGEN_ENABLE_METRICS=os.getenv("MAPGEN_ENABLE_METRICS", "1") == "1",
        MAPGEN_CACHE_MAX=int(os.getenv("MAPGEN_CACHE_MAX", "8")),
    )
    for key in _CONFIG_KEYS:
        if key in os.environ:
            app.config[key] = os.environ[key]
    if overrides:
        app.config.update(overrides)

    from mapgen.routes.dungeon_api import bp_dungeon
    from mapgen.routes.seed_api import bp_seed

    app.register_blueprint(bp_dungeon)
    app.register_blueprint(bp_seed)

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
