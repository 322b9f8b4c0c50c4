"""Route handlers for the proxy endpoints."""
import json
import time

from flask import Response, g, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from ..core.config import get_config_errors
from ..core.errors import (
    ConfigurationError,
    InvalidRequestError,
    NoCompletionError,
    ProxyError,
)
from ..services.upstream_service import UpstreamClient
from ..utils.completion import extract_completion, wrap_as_completion
from ..utils.http import error_response
from ..utils.logging import log_event
from ..utils.params import normalize_prompt
from .schemas import InboundRequest

CHAT_COMPLETION_ALIASES = ("/chat/completions", "/v1/chat/completions")


def _parse_json_body():
    raw = request.get_data(cache=True)
    try:
        data = json.loads(raw) if raw else None
    except ValueError as e:
        raise InvalidRequestError("Invalid JSON in request body") from e
    if data is None:
        raise InvalidRequestError("No prompt or messages provided")
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def _proxy_paths(settings):
    paths = [settings.proxy_path]
    for alias in CHAT_COMPLETION_ALIASES:
        if alias not in paths:
            paths.append(alias)
    return paths


def register_routes(app, settings):
    """Register Flask routes on the app."""

    def _complete():
        if not settings.api_key_configured:
            raise ConfigurationError("API key not configured")
        data = _parse_json_body()
        try:
            payload = InboundRequest.model_validate(data)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            log_event(
                30,
                "request_validation_failed",
                request_id=g.request_id,
                errors=[{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in e.errors()],
            )
            raise InvalidRequestError(f"Invalid {', '.join(fields) or 'request'}") from e
        prompt = normalize_prompt(data)
        g.resolved_model = payload.model or settings.default_model
        g.upstream_url = settings.upstream_url

        client = UpstreamClient.from_settings(settings)
        upstream_body = client.send(prompt, request_id=g.request_id)
        completion = extract_completion(
            upstream_body,
            settings.completion_fields,
            settings.completion_fallback,
        )
        if not completion:
            raise NoCompletionError("No completion returned from upstream API", debug=upstream_body)
        return wrap_as_completion(prompt, completion, g.resolved_model)

    def proxy():
        if request.method == "OPTIONS":
            return Response(status=200)
        try:
            return jsonify(_complete())
        except ProxyError as e:
            log_event(
                40 if e.status >= 500 else 30,
                "proxy_error",
                request_id=g.request_id,
                status=e.status,
                error=e.message,
                kind=e.__class__.__name__,
            )
            debug = e.debug if settings.include_debug else None
            return error_response(e.message, e.status, debug)
        except HTTPException:
            raise
        except Exception as e:
            log_event(40, "proxy_internal_error", error=str(e), request_id=g.request_id)
            return error_response("Internal server error", 500)

    for path in _proxy_paths(settings):
        app.add_url_rule(
            path,
            endpoint=f"proxy:{path}",
            view_func=proxy,
            methods=["POST", "OPTIONS"],
            provide_automatic_options=False,
        )

    @app.route("/", methods=["GET"])
    def index():
        return jsonify(
            {
                "message": "You.com Proxy Server",
                "endpoints": {
                    "proxy": f"POST {settings.proxy_path}",
                    "chat_completions": [f"POST {alias}" for alias in CHAT_COMPLETION_ALIASES],
                    "health": "GET /health",
                },
            }
        )

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        errors = get_config_errors()
        status = "ok" if not errors else "warn"
        verbose = request.args.get("verbose") == "1"
        if not verbose:
            return jsonify({"status": status})
        return jsonify(
            {
                "status": status,
                "uptime_seconds": int(time.time() - app.config.get("APP_STARTED_AT", time.time())),
                "version": settings.app_version,
                "api_key_configured": settings.api_key_configured,
                "config_errors": errors,
            }
        )

    @app.errorhandler(404)
    def handle_not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response("Method Not Allowed", 405)

    @app.errorhandler(413)
    def handle_payload_too_large(error):
        return error_response("Request body too large", 413)
