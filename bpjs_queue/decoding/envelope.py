"""Parsing of the plaintext BPJS response envelope."""

from __future__ import annotations

import json
from typing import Any

from bpjs_queue.domain import EncryptedEnvelope, EnvelopeFormatError, EnvelopeMetadata

_KNOWN_METADATA_KEYS = ("code", "message")


def decoding_parse_metadata(raw_metadata: Any) -> EnvelopeMetadata | None:
    """Normalize an upstream metadata block.

    BPJS services send `code` as either an int or a numeric string. Keys other
    than `code` and `message` are kept on `extra` so they reach the caller.

    Args:
        raw_metadata: Raw `metadata` value from the envelope.

    Returns:
        EnvelopeMetadata | None: Normalized metadata, or None when upstream sent no metadata object.
    """

    if not isinstance(raw_metadata, dict):
        return None

    raw_code = raw_metadata.get("code")
    try:
        code = int(raw_code)
    except (TypeError, ValueError):
        code = 0
    extra = {key: value for key, value in raw_metadata.items() if key not in _KNOWN_METADATA_KEYS}
    return EnvelopeMetadata(code=code, message=str(raw_metadata.get("message") or ""), extra=extra)


def decoding_parse_envelope(body_text: str) -> EncryptedEnvelope:
    """Parse upstream body text into an encrypted envelope.

    Args:
        body_text: Raw 2xx response body.

    Returns:
        EncryptedEnvelope: Envelope with response field and normalized metadata.

    Raises:
        EnvelopeFormatError: Raised when the body is not a JSON object or lacks a usable `response`.
    """

    try:
        body = json.loads(body_text)
    except json.JSONDecodeError as error:
        raise EnvelopeFormatError("Invalid response format from BPJS API", error_code="invalid_json") from error
    if not isinstance(body, dict):
        raise EnvelopeFormatError("BPJS API response is not a JSON object", error_code="invalid_shape")

    metadata = decoding_parse_metadata(body.get("metadata", body.get("metaData")))
    response_field = body.get("response")
    if isinstance(response_field, str) and response_field.strip():
        return EncryptedEnvelope(response=response_field.strip(), metadata=metadata)
    if isinstance(response_field, dict):
        return EncryptedEnvelope(response=response_field, metadata=metadata)

    detail = (
        f" (metadata code={metadata.code}, message={metadata.message})"
        if metadata is not None and metadata.message
        else ""
    )
    raise EnvelopeFormatError(
        f"Missing 'response' field in BPJS API response{detail}",
        error_code="missing_response",
        metadata=metadata,
    )
