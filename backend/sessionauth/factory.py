"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from sessionauth.core.config import PLACEHOLDER_JWT_SECRET, BaseConfig, get_config
from sessionauth.core.logger import configure_logging, init_app as init_logging


def _check_signing_key(app: Flask) -> None:
    """Refuse to serve real traffic with the placeholder signing key."""
    if app.testing or app.debug:
        return
    if app.config.get("JWT_SECRET_KEY") in (None, "", PLACEHOLDER_JWT_SECRET):
        raise RuntimeError("JWT_SECRET_KEY must be set to a real secret outside development.")


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    _check_signing_key(app)

    # Proxy headers if running behind a reverse proxy
    from sessionauth.core import proxy

    proxy.init_app(app)

    from sessionauth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from sessionauth.services.wiring import build_services

    build_services(app)

    from sessionauth.api import init_app as init_api

    init_api(app)

    from sessionauth.core import errors

    errors.init_app(app)

    from sessionauth import cli as app_cli

    app_cli.init_app(app)

    return app
