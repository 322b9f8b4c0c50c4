"""Proxy error taxonomy and upstream failure classification."""
import http.client


class ProxyError(Exception):
    """Base class for failures surfaced to the inbound caller."""

    status = 500

    def __init__(self, message: str, status: int | None = None, debug=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.debug = debug


class ConfigurationError(ProxyError):
    status = 500


class InvalidRequestError(ProxyError):
    status = 400


class UpstreamHTTPError(ProxyError):
    status = 502


class UpstreamTimeout(ProxyError):
    status = 504


class UpstreamUnreachable(ProxyError):
    status = 500


class InvalidUpstreamResponse(ProxyError):
    status = 502


class NoCompletionError(ProxyError):
    status = 502


AUTH_FAILED_MESSAGE = "Authentication failed with upstream API"
RATE_LIMITED_MESSAGE = "Upstream API rate limit exceeded"
TIMEOUT_MESSAGE = "Upstream request timeout"
GENERIC_UPSTREAM_MESSAGE = "Upstream API error"


def _upstream_error_field(body):
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def classify_http_error(status: int, reason: str | None, body=None, auth_override: bool = True) -> UpstreamHTTPError:
    """Map an upstream non-2xx answer to the error returned inbound."""
    if status in (401, 403) and auth_override:
        message = AUTH_FAILED_MESSAGE
    elif status == 429:
        message = RATE_LIMITED_MESSAGE
    else:
        message = _upstream_error_field(body) or reason or http.client.responses.get(status) or GENERIC_UPSTREAM_MESSAGE
    return UpstreamHTTPError(message, status=status, debug=body)


def classify_transport_error(exc: BaseException) -> ProxyError:
    """Map a failure with no upstream answer to a timeout or unreachable error."""
    reason = getattr(exc, "reason", None)
    if isinstance(exc, TimeoutError) or isinstance(reason, TimeoutError):
        return UpstreamTimeout(TIMEOUT_MESSAGE)
    detail = reason if reason is not None else exc
    return UpstreamUnreachable(str(detail) or exc.__class__.__name__)
