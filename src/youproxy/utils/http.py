"""HTTP helpers and error responses."""
from flask import jsonify, request

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def get_client_ip() -> str:
    """Resolve client IP with basic X-Forwarded-For support."""
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.remote_addr or "unknown"


def error_response(message: str, status: int = 400, debug=None):
    """Return the flat `{"error": ...}` payload, with `debug` when given."""
    payload = {"error": message}
    if debug is not None:
        payload["debug"] = debug
    return jsonify(payload), status
