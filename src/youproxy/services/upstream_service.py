"""Single-attempt client for the upstream text-generation API."""
import http.client
import json
import time
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..core.errors import (
    ConfigurationError,
    InvalidUpstreamResponse,
    classify_http_error,
    classify_transport_error,
)
from ..utils.logging import log_event, truncate_text


def _decode_body(raw: bytes):
    """Parse a JSON body, falling back to text for non-JSON answers."""
    text = raw.decode("utf-8", errors="replace") if raw else ""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class UpstreamClient:
    """POSTs one prompt upstream and returns the decoded JSON answer."""

    def __init__(self, url: str, api_key: str, timeout: float, prompt_field: str = "query", auth_override: bool = True):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.prompt_field = prompt_field
        self.auth_override = auth_override

    @classmethod
    def from_settings(cls, settings) -> "UpstreamClient":
        return cls(
            url=settings.upstream_url,
            api_key=settings.api_key,
            timeout=settings.upstream_timeout,
            prompt_field=settings.upstream_prompt_field,
            auth_override=settings.auth_error_override,
        )

    def build_request(self, prompt: str) -> Request:
        body = json.dumps({self.prompt_field: prompt}, ensure_ascii=False).encode("utf-8")
        headers = {
            "X-API-Key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        return Request(self.url, data=body, headers=headers, method="POST")

    def send(self, prompt: str, request_id: str = ""):
        if not self.api_key:
            raise ConfigurationError("API key not configured")
        if not self.url:
            raise ConfigurationError("Upstream URL not configured")
        req = self.build_request(prompt)
        log_event(
            20,
            "upstream_request",
            request_id=request_id,
            upstream_url=self.url,
            prompt_preview=truncate_text(prompt, 100),
        )
        started = time.time()
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                status = resp.status
                raw = resp.read()
        except HTTPError as e:
            body = _decode_body(e.read() or b"")
            log_event(
                40,
                "upstream_error",
                request_id=request_id,
                upstream_url=self.url,
                status=e.code,
                body=truncate_text(body if isinstance(body, str) else json.dumps(body, ensure_ascii=False)),
            )
            raise classify_http_error(e.code, e.reason, body, auth_override=self.auth_override) from e
        except (TimeoutError, URLError, http.client.HTTPException, OSError) as e:
            log_event(40, "upstream_error", request_id=request_id, upstream_url=self.url, error=str(e))
            raise classify_transport_error(e) from e

        log_event(
            20,
            "upstream_response",
            request_id=request_id,
            status=status,
            latency_ms=int((time.time() - started) * 1000),
        )
        body = _decode_body(raw)
        if body is None or isinstance(body, str):
            raise InvalidUpstreamResponse(
                f"Upstream returned a non-JSON response (status {status})",
                debug=truncate_text(body),
            )
        return body
