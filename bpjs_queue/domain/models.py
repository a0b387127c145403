"""Typed domain models shared across runtime layers.

This module provides immutable data contracts for the signing, upstream,
decoding and response assembly stages of one queue lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Mapping

QUEUE_ITEM_FIELDS: Final[tuple[str, ...]] = (
    "kodebooking",
    "tanggal",
    "kodepoli",
    "kodedokter",
    "jampraktek",
    "nik",
    "nokapst",
    "nohp",
    "norekammedis",
    "jeniskunjungan",
    "nomorreferensi",
    "sumberdata",
    "ispeserta",
    "noantrean",
    "estimasidilayani",
    "createdtime",
    "status",
)


@dataclass(frozen=True)
class Credentials:
    """BPJS consumer credentials resolved once from process configuration.

    Attributes:
        consumer_id: BPJS consumer identifier (`x-cons-id`).
        secret_key: Consumer secret used for HMAC signing and AES key derivation.
        user_key: API gateway user key (`user_key` header).
    """

    consumer_id: str
    secret_key: str = field(repr=False)
    user_key: str = field(repr=False)


@dataclass(frozen=True)
class SignedRequest:
    """Signed header set for exactly one outbound upstream request.

    Attributes:
        timestamp: Decimal string of unix epoch milliseconds.
        signature: Standard base64 HMAC-SHA256 signature.
        headers: Complete outbound header mapping.
    """

    timestamp: str
    signature: str
    headers: Mapping[str, str]


@dataclass(frozen=True)
class EnvelopeMetadata:
    """Plaintext metadata block carried by the upstream envelope.

    Attributes:
        code: Upstream status code.
        message: Upstream status message.
        extra: Any other upstream metadata keys, passed through untouched.
    """

    code: int
    message: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    def domain_to_payload(self) -> dict[str, object]:
        """Render metadata as a JSON-compatible mapping.

        Returns:
            dict[str, object]: Metadata payload with upstream extra keys preserved.
        """

        return {**self.extra, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class EncryptedEnvelope:
    """Upstream wire shape before decoding.

    Attributes:
        response: Encrypted base64 text, or an already-plain JSON mapping.
        metadata: Upstream metadata block, None when upstream sent none.
    """

    response: str | dict[str, Any]
    metadata: EnvelopeMetadata | None


@dataclass(frozen=True)
class AdapterResult:
    """Outward contract returned to the caller.

    Attributes:
        response: Decoded or synthetic payload.
        metadata: Upstream metadata (None when upstream sent none), or synthetic metadata tagged `(Mock Data)`.
        degraded: True when the payload was substituted by the fallback policy.
    """

    response: dict[str, Any]
    metadata: EnvelopeMetadata | None
    degraded: bool = False

    def domain_to_payload(self) -> dict[str, object]:
        """Render result as the JSON response body.

        Returns:
            dict[str, object]: Response body with `response`, `metadata` and `degraded` keys.
        """

        return {
            "response": self.response,
            "metadata": self.metadata.domain_to_payload() if self.metadata is not None else None,
            "degraded": self.degraded,
        }
