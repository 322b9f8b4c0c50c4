"""Application factory and entrypoint."""
import os
import time

from flask import Flask

from .config import get_config_errors, resolve_port
from .settings import Settings, get_settings
from ..api.handlers import register_routes
from ..api.middleware import register_middlewares
from ..utils.logging import log_event, setup_logging


def create_app(settings: Settings | None = None) -> Flask:
    """Create and configure the Flask application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_dir)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["APP_STARTED_AT"] = time.time()
    app.config["SETTINGS"] = settings

    if not settings.api_key_configured:
        log_event(30, "config_warning", error="API key not configured; proxy requests will fail")

    register_middlewares(app, settings)
    register_routes(app, settings)
    return app


def run() -> None:
    """Run the Flask development server."""
    app = create_app()
    settings = app.config["SETTINGS"]

    if settings.strict_config:
        config_errors = get_config_errors()
        if config_errors:
            for err in config_errors:
                log_event(40, "config_error", error=err)
            raise SystemExit("Strict config enabled; fix config.json errors.")

    port = resolve_port(settings.port)
    debug = os.getenv("FLASK_DEBUG", "").lower() in ("1", "true", "yes", "on")
    log_event(20, "server_start", port=port, proxy_path=settings.proxy_path, upstream_url=settings.upstream_url)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    run()
