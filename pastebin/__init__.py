from __future__ import annotations

import os
from functools import partial
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from .backends import KeyValueBackend, build_backend
from .clock import Clock, SystemClock
from .config import get_config
from .db import init_db
from .ids import generate_paste_id
from .observability import init_observability
from .api.pages import pages_bp
from .api.pastes import api_bp
from .services.paste_store import PasteStore


def create_app(
    env_name: str | None = None,
    *,
    config_overrides: Optional[Mapping[str, Any]] = None,
    backend: Optional[KeyValueBackend] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    """
    Application factory for the paste service.

    The configuration is selected based on the provided ``env_name`` or,
    if not given, the ``APP_ENV`` environment variable (falling back to
    ``development``).  ``backend`` and ``clock`` replace the configured ones,
    which is how tests inject fakes.
    """
    if env_name is None:
        env_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__)
    app_config = get_config(env_name)
    app.config.from_object(app_config)
    if config_overrides:
        app.config.update(config_overrides)

    CORS(
        app
    )

    # Initialize infrastructure layers
    init_observability(app)
    if backend is None:
        if app.config["KV_BACKEND"] == "sql":
            init_db(app)
        backend = build_backend(app.config)

    app.extensions["paste_store"] = PasteStore(
        backend=backend,
        clock=clock or SystemClock(),
        id_factory=partial(generate_paste_id, app.config["PASTE_ID_LENGTH"]),
    )

    # Register blueprints
    app.register_blueprint(api_bp)
    app.register_blueprint(pages_bp)

    return app
