import io
import json
from urllib.error import HTTPError

import pytest

import youproxy.services.upstream_service as upstream_module
from youproxy.core.app import create_app
from youproxy.core.settings import Settings

UPSTREAM_URL = "https://upstream.test/agent"


class FakeUpstreamResponse:
    def __init__(self, body, status: int = 200):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeUpstream:
    """Stand-in for urlopen that records calls and replays one outcome."""

    def __init__(self):
        self.calls = []
        self.outcome = FakeUpstreamResponse({"result": "ok"})

    def reply(self, body, status: int = 200):
        self.outcome = FakeUpstreamResponse(body, status)

    def fail_http(self, status: int, body=None, reason: str = "Error"):
        raw = b"" if body is None else (json.dumps(body) if not isinstance(body, str) else body).encode("utf-8")
        self.outcome = HTTPError(UPSTREAM_URL, status, reason, {}, io.BytesIO(raw))

    def fail(self, exc: BaseException):
        self.outcome = exc

    def __call__(self, req, timeout=None):
        self.calls.append(
            {
                "url": req.full_url,
                "method": req.get_method(),
                "headers": {key.lower(): value for key, value in req.header_items()},
                "body": json.loads(req.data.decode("utf-8")),
                "timeout": timeout,
            }
        )
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing-config.json"))
    monkeypatch.delenv("LOG_DIR", raising=False)


@pytest.fixture
def settings():
    return Settings(api_key="test-key", upstream_url=UPSTREAM_URL, upstream_timeout=30.0)


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(upstream_module, "urlopen", fake)
    return fake


@pytest.fixture
def make_client():
    def _make(settings):
        app = create_app(settings)
        app.config["TESTING"] = True
        return app.test_client()

    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)

