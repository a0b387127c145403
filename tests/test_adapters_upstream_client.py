"""Regression tests for the BPJS upstream client transport handling."""

from __future__ import annotations

import httpx
import pytest

from bpjs_queue.adapters import BpjsUpstreamClient
from bpjs_queue.domain import SignedRequest, UpstreamConnectionError, UpstreamTimeoutError


def _signed_request() -> SignedRequest:
    """Build a deterministic signed request.

    Returns:
        SignedRequest: Signed header set for client tests.
    """

    return SignedRequest(
        timestamp="1616544000000",
        signature="c2lnbmF0dXJl",
        headers={
            "x-cons-id": "12345",
            "x-timestamp": "1616544000000",
            "x-signature": "c2lnbmF0dXJl",
            "user_key": "user-key",
            "Content-Type": "application/json",
        },
    )


def test_adapters_upstream_fetch_embeds_date_and_sends_signed_headers() -> None:
    """Issue one GET to `<base>/<date>` carrying every signed header.

    Returns:
        None: Assertions validate request construction.

    Raises:
        AssertionError: Raised when URL or headers are wrong.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, text='{"response": "abc", "metadata": {"code": 200, "message": "OK"}}')

    client = BpjsUpstreamClient(
        base_url="https://bpjs.example.test/antreanrs/antrean/pendaftaran/tanggal/",
        transport=httpx.MockTransport(_handler),
    )

    result = client.adapter_fetch("2021-03-24", _signed_request())

    assert len(captured_requests) == 1
    sent_request = captured_requests[0]
    assert sent_request.method == "GET"
    assert str(sent_request.url) == "https://bpjs.example.test/antreanrs/antrean/pendaftaran/tanggal/2021-03-24"
    assert sent_request.headers["x-cons-id"] == "12345"
    assert sent_request.headers["x-timestamp"] == "1616544000000"
    assert sent_request.headers["x-signature"] == "c2lnbmF0dXJl"
    assert sent_request.headers["user_key"] == "user-key"
    assert sent_request.headers["content-type"] == "application/json"
    assert result.status_code == 200
    assert result.is_success is True


def test_adapters_upstream_fetch_returns_non_success_status_untouched() -> None:
    """Return raw status and body for non-2xx responses without raising.

    Returns:
        None: Assertions validate passthrough behavior.

    Raises:
        AssertionError: Raised when the client interprets the response.
    """

    client = BpjsUpstreamClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(404, text="Not Found")),
    )

    result = client.adapter_fetch("2021-03-24", _signed_request())

    assert result.status_code == 404
    assert result.body_text == "Not Found"
    assert result.is_success is False


def test_adapters_upstream_timeout_raises_typed_timeout_error() -> None:
    """Map transport timeouts to UpstreamTimeoutError."""

    def _raise_timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = BpjsUpstreamClient(transport=httpx.MockTransport(_raise_timeout))

    with pytest.raises(UpstreamTimeoutError, match="timed out"):
        client.adapter_fetch("2021-03-24", _signed_request())


def test_adapters_upstream_connect_failure_raises_typed_connection_error() -> None:
    """Map connection failures to UpstreamConnectionError."""

    def _raise_connect_error(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = BpjsUpstreamClient(transport=httpx.MockTransport(_raise_connect_error))

    with pytest.raises(UpstreamConnectionError, match="connection refused"):
        client.adapter_fetch("2021-03-24", _signed_request())


@pytest.mark.parametrize(
    ("base_url", "timeout_seconds", "message"),
    [
        ("   ", 30.0, "base_url"),
        ("https://bpjs.example.test", 0, "request_timeout_seconds"),
    ],
)
def test_adapters_upstream_rejects_invalid_configuration(base_url: str, timeout_seconds: float, message: str) -> None:
    """Reject blank base URLs and non-positive timeouts at construction."""

    with pytest.raises(ValueError, match=message):
        BpjsUpstreamClient(base_url=base_url, request_timeout_seconds=timeout_seconds)
