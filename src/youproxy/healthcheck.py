"""Container healthcheck: ask the running proxy for GET /health."""
import json
import urllib.request

from .core.config import resolve_port
from .core.settings import get_settings


def health_url() -> str:
    """Build the /health URL on the port `run()` binds to."""
    port = resolve_port(get_settings().port)
    return f"http://127.0.0.1:{port}/health"


def main() -> int:
    """Return 0 when /health answers 200 with a status field, else 1."""
    try:
        with urllib.request.urlopen(health_url(), timeout=2) as resp:
            if resp.status != 200:
                return 1
            payload = json.loads(resp.read() or b"{}")
    except (OSError, ValueError):
        return 1
    return 0 if isinstance(payload, dict) and payload.get("status") in ("ok", "warn") else 1


if __name__ == "__main__":
    raise SystemExit(main())
