# plazacore_backend/__init__.py
from __future__ import annotations

import logging
import os
from typing import Any, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .errors import register_error_handlers
from .extensions import init_extensions


# --- Config ------------------------------------------------------------------
def _get_allowed_origins(app: Flask) -> list[str]:
    """Allowed CORS origins; local dev servers plus CORS_ALLOWED_ORIGINS."""
    default = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    extra = app.config.get("CORS_ALLOWED_ORIGINS") or ""
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "plazacore_backend.config.Config")
    if isinstance(config_object, str) and "." in config_object:
        module, _, cls = config_object.rpartition(".")
        config_object = getattr(__import__(module, fromlist=[cls]), cls)
    app.config.from_object(config_object)
    app.config.setdefault("API_PREFIX", "/api")


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _check_production_settings(app: Flask) -> None:
    if app.config.get("FLASK_ENV") != "production":
        return
    if not os.getenv("SECRET_KEY"):
        app.logger.error("SECRET_KEY is not set; using the built-in default")
    if not os.getenv("DATABASE_URL"):
        app.logger.error("DATABASE_URL is not set; falling back to %s", app.config["SQLALCHEMY_DATABASE_URI"])
    if not app.config.get("CRON_SECRET"):
        app.logger.warning("CRON_SECRET is not set; the rent bill cron endpoint is unauthenticated")


def _configure_cors(app: Flask) -> None:
    CORS(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        expose_headers=["Content-Type"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the hosting proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    from .routes import ALL_BLUEPRINTS

    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp, url_prefix=app.config["API_PREFIX"])
        app.logger.debug("Registered blueprint %s at %s", bp.name, app.config["API_PREFIX"])


def _register_cli(app: Flask) -> None:
    from .cli import register_commands

    register_commands(app)


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config class
      - dotted path to a config class (e.g., "plazacore_backend.config.ProductionConfig")
      - None (then CONFIG_CLASS env or plazacore_backend.config.Config)
    """
    app = Flask(__name__)
    _load_config(app, config_object)

    # Core middleware/logging/CORS
    _configure_logging(app)
    _check_production_settings(app)
    _configure_proxy(app)
    _configure_cors(app)

    # Init extensions & blueprints
    init_extensions(app)
    from . import models  # noqa: F401  (register tables with SQLAlchemy metadata)

    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    @app.get("/")
    def root():
        return jsonify({"service": "plazacore-backend", "message": "See /api/health"}), 200

    return app
