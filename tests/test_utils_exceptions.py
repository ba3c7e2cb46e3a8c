import errno

from mcp_http_bridge.utils.exceptions import (
    BridgeError,
    ConfigError,
    ErrorCategory,
    UpstreamHttpError,
    is_connection_refused,
    sanitize_error_message,
)


def test_upstream_http_error_category_follows_status() -> None:
    server = UpstreamHttpError(502, "Bad Gateway", body="oops")
    assert server.category is ErrorCategory.RETRYABLE
    assert server.retryable is True
    assert str(server) == "[UPSTREAM_HTTP_ERROR] HTTP 502: Bad Gateway"

    client = UpstreamHttpError(403, "Forbidden")
    assert client.category is ErrorCategory.FATAL
    assert client.retryable is False
    assert client.to_dict()["details"] == {"status": 403, "reason": "Forbidden"}


def test_config_error_records_field() -> None:
    err = ConfigError("bad endpoint", field="endpoint")
    assert isinstance(err, BridgeError)
    assert err.category is ErrorCategory.VALIDATION
    assert err.details == {"field": "endpoint"}


def test_sanitize_error_message_redacts_bearer_and_key_values() -> None:
    text = sanitize_error_message("Authorization: Bearer eyJ.abc token=supersecret")
    assert "eyJ.abc" not in text
    assert "supersecret" not in text


def test_is_connection_refused_variants() -> None:
    assert is_connection_refused(ConnectionRefusedError())
    assert is_connection_refused(OSError(errno.ECONNREFUSED, "refused"))
    assert is_connection_refused(RuntimeError("[Errno 111] Connection refused"))
    assert not is_connection_refused(RuntimeError("Name or service not known"))


def test_is_connection_refused_follows_context() -> None:
    try:
        try:
            raise ConnectionRefusedError()
        except ConnectionRefusedError:
            raise RuntimeError("wrapped")
    except RuntimeError as exc:
        assert is_connection_refused(exc)
