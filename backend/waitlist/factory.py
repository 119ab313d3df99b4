"""Application factory wiring Flask extensions, adapters and blueprints."""

from __future__ import annotations

from flask import Flask

from waitlist.core.config import BaseConfig, get_config
from waitlist.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; ``APP_ENV`` decides when omitted.
    :param instance_relative_config: Look for overrides in the instance folder.
    :param instance_config_filename: Optional instance override file.
    :returns: Configured application. Code pools are *not* seeded here; see
        ``flask waitlist seed-codes`` and the gunicorn ``when_ready`` hook.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from waitlist.core import proxy

    proxy.init_app(app)

    from waitlist.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from waitlist.core import cors

    cors.init_app(app)

    from waitlist import infra

    infra.init_app(app)

    from waitlist.api import init_app as init_api

    init_api(app)

    from waitlist.core import errors

    errors.init_app(app)

    from waitlist import cli as waitlist_cli

    waitlist_cli.init_app(app)

    return app
