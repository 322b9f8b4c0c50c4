import socket
from urllib.error import URLError

from youproxy.core.errors import (
    UpstreamHTTPError,
    UpstreamTimeout,
    UpstreamUnreachable,
    classify_http_error,
    classify_transport_error,
)


def test_http_error_keeps_upstream_status_and_error_field():
    err = classify_http_error(500, "Internal Server Error", {"error": "model overloaded"})

    assert isinstance(err, UpstreamHTTPError)
    assert err.status == 500
    assert err.message == "model overloaded"
    assert err.debug == {"error": "model overloaded"}


def test_http_error_reads_nested_error_message():
    err = classify_http_error(400, "Bad Request", {"error": {"message": "bad query"}})

    assert err.message == "bad query"


def test_http_error_falls_back_to_reason_then_generic():
    assert classify_http_error(502, "Bad Gateway", "<html>").message == "Bad Gateway"
    assert classify_http_error(503, "", None).message == "Service Unavailable"
    assert classify_http_error(599, None, None).message == "Upstream API error"


def test_auth_failures_use_fixed_message():
    for status in (401, 403):
        err = classify_http_error(status, "Unauthorized", {"error": "bad key"})
        assert err.status == status
        assert err.message == "Authentication failed with upstream API"


def test_auth_override_can_be_disabled():
    err = classify_http_error(401, "Unauthorized", {"error": "bad key"}, auth_override=False)

    assert err.message == "bad key"


def test_rate_limit_is_special_cased():
    err = classify_http_error(429, "Too Many Requests", {"error": "slow down"})

    assert err.status == 429
    assert "rate limit" in err.message.lower()


def test_socket_timeout_maps_to_504():
    err = classify_transport_error(socket.timeout("timed out"))

    assert isinstance(err, UpstreamTimeout)
    assert err.status == 504
    assert "timeout" in err.message.lower()


def test_wrapped_timeout_maps_to_504():
    err = classify_transport_error(URLError(TimeoutError("timed out")))

    assert isinstance(err, UpstreamTimeout)


def test_network_failure_maps_to_500_with_description():
    err = classify_transport_error(URLError(ConnectionRefusedError(111, "Connection refused")))

    assert isinstance(err, UpstreamUnreachable)
    assert err.status == 500
    assert "Connection refused" in err.message
