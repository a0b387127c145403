"""Regression tests for end-to-end queue lookup orchestration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Callable

import pytest

from bpjs_queue.adapters import UpstreamFetchResult
from bpjs_queue.decoding import decoding_encrypt_payload
from bpjs_queue.domain import (
    Credentials,
    RequestValidationError,
    SignedRequest,
    UpstreamConnectionError,
    UpstreamError,
)
from bpjs_queue.service import QueueLookupService, service_parse_request_date

_CREDENTIALS = Credentials(
    consumer_id="1234567890123456789",
    secret_key="SecretKeyForTests-0123",
    user_key="user-key",
)
_QUEUE_LIST = [
    {
        "kodebooking": "ABC0000001",
        "tanggal": "2021-03-24",
        "kodepoli": "INT",
        "kodedokter": 1234,
        "jampraktek": "08:00-17:00",
        "nik": "2749494383830001",
        "nokapst": "0000000000013",
        "nohp": "081234567890",
        "norekammedis": "654321",
        "jeniskunjungan": 1,
        "nomorreferensi": "1029R0021221K000012",
        "sumberdata": "Mobile JKN",
        "ispeserta": 1,
        "noantrean": "INT-0001",
        "estimasidilayani": 1669278161000,
        "createdtime": 1669278161000,
        "status": "Selesai dilayani",
    }
]


@dataclass
class FakeUpstreamClient:
    """Scripted upstream client recording every signed request it receives."""

    outcomes: list[UpstreamFetchResult | UpstreamError]
    calls: list[tuple[str, SignedRequest]] = field(default_factory=list)

    def adapter_source_name(self) -> str:
        return "fake_bpjs"

    def adapter_fetch(self, date: str, signed_request: SignedRequest) -> UpstreamFetchResult:
        self.calls.append((date, signed_request))
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, UpstreamError):
            raise outcome
        return outcome


def _encrypted_body(payload: object, metadata: dict[str, object] | None = None) -> str:
    """Build an upstream 200 body with an encrypted `response` field."""

    return json.dumps(
        {
            "response": decoding_encrypt_payload(json.dumps(payload), _CREDENTIALS),
            "metadata": metadata or {"code": 200, "message": "OK"},
        }
    )


def _ticking_clock(start_seconds: float = 1616544000.0) -> Callable[[], float]:
    """Return a clock advancing one second per call."""

    ticks = iter(range(1000))
    return lambda: start_seconds + next(ticks)


def test_service_lookup_happy_path_returns_decoded_list_and_metadata() -> None:
    """Sign, fetch, decrypt and assemble the real queue list.

    Returns:
        None: Assertions validate the full successful lookup.

    Raises:
        AssertionError: Raised when any stage alters the payload.
    """

    upstream_client = FakeUpstreamClient(
        outcomes=[UpstreamFetchResult(status_code=200, body_text=_encrypted_body({"list": _QUEUE_LIST}))]
    )
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client, clock=_ticking_clock())

    response = service.service_handle_request(b'{"date": "2021-03-24"}')

    assert response.status_code == 200
    assert response.body == {
        "response": {"list": _QUEUE_LIST},
        "metadata": {"code": 200, "message": "OK"},
        "degraded": False,
    }
    requested_date, signed_request = upstream_client.calls[0]
    assert requested_date == "2021-03-24"
    assert signed_request.headers["x-timestamp"] == "1616544000000"
    assert signed_request.headers["x-cons-id"] == _CREDENTIALS.consumer_id


def test_service_lookup_upstream_404_degrades_to_placeholder() -> None:
    """Return HTTP 200 with a tagged synthetic list for upstream 404."""

    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=404, body_text="Not Found")])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["degraded"] is True
    assert response.body["metadata"]["message"].endswith("(Mock Data)")
    assert response.body["response"]["error"] == "BPJS API error: 404"
    placeholder_items = response.body["response"]["list"]
    assert len(placeholder_items) == 1
    assert "Mock Data" in placeholder_items[0]["status"]


def test_service_lookup_missing_credentials_short_circuits_before_validation() -> None:
    """Return 500 without reading the body or calling upstream."""

    upstream_client = FakeUpstreamClient(outcomes=[])
    service = QueueLookupService(credentials=None, upstream_client=upstream_client)

    response = service.service_handle_request(b"not even json")

    assert response.status_code == 500
    assert "Missing" in response.body["error"]
    assert upstream_client.calls == []
    assert service.credentials_configured is False


@pytest.mark.parametrize(
    ("raw_body", "expected_error"),
    [
        (b"{}", "Date parameter is required"),
        (b"", "Date parameter is required"),
        (b'{"date": ""}', "Date parameter is required"),
        (b'{"date": "24-03-2021"}', "Date must use YYYY-MM-DD format"),
        (b'{"date": "2021-02-30"}', "Date must use YYYY-MM-DD format"),
        (b"[1]", "Request body must be a JSON object"),
        (b"{oops", "Invalid JSON body"),
    ],
)
def test_service_lookup_invalid_body_returns_400(raw_body: bytes, expected_error: str) -> None:
    """Reject missing or malformed dates before signing."""

    upstream_client = FakeUpstreamClient(outcomes=[])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_handle_request(raw_body)

    assert response.status_code == 400
    assert response.body == {"error": expected_error}
    assert upstream_client.calls == []


def test_service_lookup_empty_secret_key_fails_signing_with_500() -> None:
    """Surface signing failure as 500 rather than a missing-credentials error."""

    upstream_client = FakeUpstreamClient(outcomes=[])
    credentials = Credentials(consumer_id="1234567890123456", secret_key="", user_key="user-key")
    service = QueueLookupService(credentials=credentials, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 500
    assert "signature" in response.body["error"]
    assert upstream_client.calls == []


def test_service_lookup_unreachable_upstream_degrades_to_placeholder() -> None:
    """Degrade transport failures after the final attempt."""

    upstream_client = FakeUpstreamClient(outcomes=[UpstreamConnectionError("connection refused")])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["degraded"] is True
    assert response.body["response"]["error"] == "BPJS API unreachable: connection refused"


def test_service_lookup_retry_re_signs_every_attempt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Retry transport failures and 5xx with a fresh timestamp per attempt.

    Returns:
        None: Assertions validate retry count and signature freshness.

    Raises:
        AssertionError: Raised when signed headers are reused across attempts.
    """

    sleep_calls: list[float] = []
    monkeypatch.setattr("bpjs_queue.service.queue_lookup.time.sleep", sleep_calls.append)
    upstream_client = FakeUpstreamClient(
        outcomes=[
            UpstreamConnectionError("connection reset"),
            UpstreamFetchResult(status_code=503, body_text="Service Unavailable"),
            UpstreamFetchResult(status_code=200, body_text=_encrypted_body({"list": _QUEUE_LIST})),
        ]
    )
    service = QueueLookupService(
        credentials=_CREDENTIALS,
        upstream_client=upstream_client,
        clock=_ticking_clock(),
        retry_attempts=3,
        retry_backoff_seconds=0.25,
    )

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["degraded"] is False
    assert len(upstream_client.calls) == 3
    timestamps = [signed_request.timestamp for _, signed_request in upstream_client.calls]
    signatures = [signed_request.signature for _, signed_request in upstream_client.calls]
    assert timestamps == ["1616544000000", "1616544001000", "1616544002000"]
    assert len(set(signatures)) == 3
    assert sleep_calls == [0.25, 0.25]


def test_service_lookup_does_not_retry_client_errors() -> None:
    """Return the first 4xx without further attempts."""

    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=401, body_text="Unauthorized")])
    service = QueueLookupService(
        credentials=_CREDENTIALS,
        upstream_client=upstream_client,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )

    response = service.service_lookup_queue("2021-03-24")

    assert len(upstream_client.calls) == 1
    assert response.body["response"]["error"] == "BPJS API error: 401"


def test_service_lookup_missing_response_field_keeps_upstream_metadata() -> None:
    """Degrade a 200 without `response`, tagging the upstream metadata."""

    body_text = json.dumps({"metadata": {"code": 201, "message": "Data tidak ditemukan"}})
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["degraded"] is True
    assert response.body["metadata"] == {"code": 201, "message": "Data tidak ditemukan (Mock Data)"}


def test_service_lookup_undecodable_plaintext_degrades_with_text() -> None:
    """Degrade non-JSON plaintext to a placeholder while keeping the raw text."""

    body_text = json.dumps(
        {
            "response": decoding_encrypt_payload("{not json", _CREDENTIALS),
            "metadata": {"code": 200, "message": "OK"},
        }
    )
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["degraded"] is True
    assert response.body["metadata"] == {"code": 200, "message": "OK (Mock Data)"}
    assert response.body["response"]["error"] == "parse failed"
    assert response.body["response"]["text"] == "{not json"


def test_service_lookup_undecryptable_ciphertext_degrades_with_error() -> None:
    """Degrade a response field that no ciphertext route can decode."""

    body_text = json.dumps({"response": "%%% not ciphertext %%%", "metadata": {"code": 200, "message": "OK"}})
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body["response"]["error"].startswith("Failed to decode response")


def test_service_parse_request_date_strips_whitespace() -> None:
    """Accept surrounding whitespace around a valid date."""

    assert service_parse_request_date(b'{"date": " 2021-03-24 "}') == "2021-03-24"


def test_service_parse_request_date_rejects_non_string_date() -> None:
    """Reject numeric date values as missing."""

    with pytest.raises(RequestValidationError, match="required"):
        service_parse_request_date(b'{"date": 20210324}')


@pytest.mark.parametrize(
    ("retry_attempts", "retry_backoff_seconds", "message"),
    [(0, 0.5, "retry_attempts"), (1, -1.0, "retry_backoff_seconds")],
)
def test_service_lookup_rejects_invalid_retry_configuration(
    retry_attempts: int,
    retry_backoff_seconds: float,
    message: str,
) -> None:
    """Reject non-positive attempt counts and negative backoff."""

    with pytest.raises(ValueError, match=message):
        QueueLookupService(
            credentials=_CREDENTIALS,
            upstream_client=FakeUpstreamClient(outcomes=[]),
            retry_attempts=retry_attempts,
            retry_backoff_seconds=retry_backoff_seconds,
        )


def test_service_lookup_decode_failure_logs_failed_stage_and_timeline(caplog: pytest.LogCaptureFixture) -> None:
    """Log the failing stage and stage timeline when decoding degrades the result."""

    body_text = json.dumps({"response": "%%% not ciphertext %%%", "metadata": {"code": 200, "message": "OK"}})
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    with caplog.at_level("WARNING", logger="bpjs_queue.service.queue_lookup"):
        response = service.service_lookup_queue("2021-03-24")

    assert response.body["degraded"] is True
    degraded_records = [record for record in caplog.records if "decode degraded" in record.getMessage()]
    assert len(degraded_records) == 1
    assert "failed_stage=ciphertext" in degraded_records[0].getMessage()
    assert "'stage': 'ciphertext'" in degraded_records[0].getMessage()


def test_service_lookup_passes_extra_metadata_keys_through() -> None:
    """Return upstream metadata keys beyond `code` and `message` unchanged."""

    body_text = _encrypted_body({"list": []}, metadata={"code": 200, "message": "OK", "requestId": "abc-123"})
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.body["degraded"] is False
    assert response.body["metadata"] == {"requestId": "abc-123", "code": 200, "message": "OK"}


def test_service_lookup_without_upstream_metadata_returns_null_metadata() -> None:
    """Return null metadata for a decoded response that arrived without a metadata block."""

    body_text = json.dumps({"response": decoding_encrypt_payload(json.dumps({"list": []}), _CREDENTIALS)})
    upstream_client = FakeUpstreamClient(outcomes=[UpstreamFetchResult(status_code=200, body_text=body_text)])
    service = QueueLookupService(credentials=_CREDENTIALS, upstream_client=upstream_client)

    response = service.service_lookup_queue("2021-03-24")

    assert response.status_code == 200
    assert response.body == {"response": {"list": []}, "metadata": None, "degraded": False}
