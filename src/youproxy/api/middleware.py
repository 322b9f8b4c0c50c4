"""Flask middleware registration for request ids, CORS, and logging."""
import json
import time
import uuid

from flask import g, request

from ..core.config import get_logging_config
from ..utils.http import CORS_HEADERS, get_client_ip
from ..utils.logging import log_event, redact_headers, redact_payload, should_log_request

_QUIET_PATHS = ("/health", "/healthz", "/favicon.ico")


def _request_body_detail(log_cfg):
    raw = request.get_data(cache=True)
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        max_len = int(log_cfg.get("max_body_length") or 4096)
        return raw[:max_len].decode("utf-8", errors="replace")
    return redact_payload(body, log_cfg.get("redact_keys", []))


def _response_body_detail(response, log_cfg):
    max_len = int(log_cfg.get("max_body_length") or 4096)
    if response.mimetype != "application/json":
        return "[body omitted]"
    data = response.get_data()
    text = data[:max_len].decode("utf-8", errors="replace")
    if len(data) > max_len:
        text += "...(truncated)"
    return text


def register_middlewares(app, settings):
    """Register Flask middlewares on the app."""

    @app.before_request
    def attach_request_context():
        g.request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        g.request_start = time.time()

    @app.after_request
    def add_headers(response):
        response.headers["X-Request-ID"] = getattr(g, "request_id", "")
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value

        if request.path in _QUIET_PATHS or not should_log_request(response.status_code):
            return response

        latency_ms = None
        if hasattr(g, "request_start"):
            latency_ms = int((time.time() - g.request_start) * 1000)
        log_event(
            20,
            "request",
            request_id=getattr(g, "request_id", ""),
            method=request.method,
            path=request.path,
            status=response.status_code,
            latency_ms=latency_ms,
            model=getattr(g, "resolved_model", None),
            upstream_url=getattr(g, "upstream_url", None),
            client_ip=get_client_ip(),
        )
        log_cfg = get_logging_config()
        detail = {}
        if log_cfg.get("include_headers"):
            detail["headers"] = redact_headers(dict(request.headers), log_cfg.get("redact_headers", []))
        if log_cfg.get("include_body") and request.method == "POST":
            detail["body"] = _request_body_detail(log_cfg)
            detail["response"] = _response_body_detail(response, log_cfg)
        if detail:
            log_event(20, "request_detail", request_id=getattr(g, "request_id", ""), **detail)
        return response
