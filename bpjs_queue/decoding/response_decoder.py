"""Multi-stage decoder turning an encrypted BPJS `response` field into JSON.

Stages run in a fixed order: ciphertext resolution (base64, hex, latin-1),
AES-128-CBC decryption, optional LZ-string decompression, JSON parse. No
stage raises; every failure ends in a `DecodeOutcome` whose payload carries a
non-empty `error` string.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from bpjs_queue.domain import (
    STAGE_STATUS_COMPLETED,
    STAGE_STATUS_FAILED,
    STAGE_STATUS_SKIPPED,
    Credentials,
    domain_build_stage_event,
)

from .attempts import DecodeAttempt, decoding_ciphertext_routes, decoding_failed, decoding_first_success, decoding_ok
from .cipher import decoding_aes_decrypt, decoding_derive_key_material
from .compression import decoding_looks_compressed, decoding_lz_decompress

logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = "parse failed"


@dataclass(frozen=True)
class DecodeOutcome:
    """Decoder output plus diagnostics.

    Attributes:
        payload: Decoded payload, or `{error, text?}` when a stage failed.
        failed_stage: Name of the failing stage, None on success.
        stage_timeline: Structured per-stage events.
    """

    payload: dict[str, Any]
    failed_stage: str | None = None
    stage_timeline: list[dict[str, object]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return whether every required stage completed."""

        return self.failed_stage is None

    @property
    def error_message(self) -> str | None:
        """Return the embedded error string, if any."""

        error_value = self.payload.get("error")
        return str(error_value) if error_value else None


def decoding_parse_json(source_label: str, candidate_text: str) -> DecodeAttempt:
    """Parse one plaintext candidate as JSON.

    Args:
        source_label: Where the candidate came from (`lz_string` or `plaintext`).
        candidate_text: Text to parse.

    Returns:
        DecodeAttempt: `json:<source>` attempt carrying the parsed value.
    """

    label = f"json:{source_label}"
    try:
        return decoding_ok(label, json.loads(candidate_text))
    except json.JSONDecodeError as error:
        return decoding_failed(label, f"{error.msg} at position {error.pos}")


def decoding_normalize_payload(parsed_value: Any) -> dict[str, Any]:
    """Wrap non-object JSON values so the payload is always a mapping.

    Args:
        parsed_value: Parsed JSON value.

    Returns:
        dict[str, Any]: Objects unchanged, arrays as `{list: ...}`, scalars as `{data: ...}`.
    """

    if isinstance(parsed_value, dict):
        return parsed_value
    if isinstance(parsed_value, list):
        return {"list": parsed_value}
    return {"data": parsed_value}


class ResponseDecoder:
    """Decoder bound to one credential set."""

    def __init__(self, credentials: Credentials):
        """Initialize decoder with AES key material derived from credentials.

        Args:
            credentials: BPJS credentials.

        Returns:
            None: Initializer does not return a value.
        """

        self._key, self._iv = decoding_derive_key_material(credentials)

    def decoder_decode(self, encrypted_response: str | dict[str, Any]) -> DecodeOutcome:
        """Decode one envelope `response` field.

        Args:
            encrypted_response: Base64 text, or an already-plain JSON object.

        Returns:
            DecodeOutcome: Decoded payload or an error-carrying payload; never raises.
        """

        stage_timeline: list[dict[str, object]] = []

        if isinstance(encrypted_response, dict):
            stage_timeline.append(
                domain_build_stage_event(stage="ciphertext", status=STAGE_STATUS_SKIPPED, details={"reason": "plain object"})
            )
            return DecodeOutcome(payload=encrypted_response, stage_timeline=stage_timeline)

        resolved_routes: list[str] = []
        decrypt_selection = decoding_first_success(
            [
                self._decoder_bind_decrypt_attempt(route, resolved_routes)
                for route in decoding_ciphertext_routes(encrypted_response)
            ]
        )
        if decrypt_selection.selected is None:
            rejection_summary = decrypt_selection.decoding_rejection_summary()
            if not resolved_routes:
                return self._decoder_fail(
                    stage="ciphertext",
                    error_message=f"Failed to decode response: {rejection_summary}",
                    stage_timeline=stage_timeline,
                )
            stage_timeline.append(
                domain_build_stage_event(
                    stage="ciphertext",
                    status=STAGE_STATUS_COMPLETED,
                    details={"resolved_routes": resolved_routes},
                )
            )
            return self._decoder_fail(
                stage="aes_cbc",
                error_message=f"Failed to decrypt response: {rejection_summary}",
                stage_timeline=stage_timeline,
            )

        stage_timeline.append(
            domain_build_stage_event(
                stage="ciphertext",
                status=STAGE_STATUS_COMPLETED,
                details={
                    "route": decrypt_selection.selected.label,
                    "rejected_routes": [attempt.label for attempt in decrypt_selection.rejected],
                },
            )
        )
        plaintext: str = decrypt_selection.selected.value
        stage_timeline.append(domain_build_stage_event(stage="aes_cbc", status=STAGE_STATUS_COMPLETED))

        json_candidates = self._decoder_json_candidates(plaintext=plaintext, stage_timeline=stage_timeline)
        json_selection = decoding_first_success(
            [self._decoder_bind_json_attempt(label, text) for label, text in json_candidates]
        )
        if json_selection.selected is None:
            logger.warning("BPJS plaintext is not JSON: %s", json_selection.decoding_rejection_summary())
            return self._decoder_fail(
                stage="json",
                error_message=PARSE_FAILED_MESSAGE,
                stage_timeline=stage_timeline,
                raw_text=plaintext,
            )

        stage_timeline.append(
            domain_build_stage_event(
                stage="json",
                status=STAGE_STATUS_COMPLETED,
                details={"source": json_selection.selected.label},
            )
        )
        return DecodeOutcome(
            payload=decoding_normalize_payload(json_selection.selected.value),
            stage_timeline=stage_timeline,
        )

    def _decoder_json_candidates(
        self,
        plaintext: str,
        stage_timeline: list[dict[str, object]],
    ) -> list[tuple[str, str]]:
        """Return JSON parse candidates in order: decompressed text first, then plaintext."""

        if not decoding_looks_compressed(plaintext):
            stage_timeline.append(
                domain_build_stage_event(
                    stage="lz_string",
                    status=STAGE_STATUS_SKIPPED,
                    details={"reason": "plaintext outside compressed alphabet"},
                )
            )
            return [("plaintext", plaintext)]

        decompress_attempt = decoding_lz_decompress(plaintext)
        if not decompress_attempt.succeeded:
            stage_timeline.append(
                domain_build_stage_event(
                    stage="lz_string",
                    status=STAGE_STATUS_SKIPPED,
                    details={"reason": decompress_attempt.reason},
                )
            )
            return [("plaintext", plaintext)]

        stage_timeline.append(domain_build_stage_event(stage="lz_string", status=STAGE_STATUS_COMPLETED))
        return [("lz_string", decompress_attempt.value), ("plaintext", plaintext)]

    def _decoder_bind_decrypt_attempt(
        self,
        route: Callable[[], DecodeAttempt],
        resolved_routes: list[str],
    ) -> Callable[[], DecodeAttempt]:
        """Chain one ciphertext route into AES decryption.

        A route wins only when its bytes also decrypt, so a bare hex body that
        happens to be valid base64 still reaches the hex route.

        Args:
            route: Ciphertext route attempt.
            resolved_routes: Collector for routes that produced bytes, used to name the failing stage.

        Returns:
            Callable[[], DecodeAttempt]: Attempt yielding plaintext under the route label.
        """

        def _attempt() -> DecodeAttempt:
            ciphertext_attempt = route()
            if not ciphertext_attempt.succeeded:
                return ciphertext_attempt
            resolved_routes.append(ciphertext_attempt.label)
            decrypt_attempt = decoding_aes_decrypt(ciphertext_attempt.value, self._key, self._iv)
            if not decrypt_attempt.succeeded:
                return decoding_failed(ciphertext_attempt.label, str(decrypt_attempt.reason))
            return decoding_ok(ciphertext_attempt.label, decrypt_attempt.value)

        return _attempt

    @staticmethod
    def _decoder_bind_json_attempt(source_label: str, candidate_text: str) -> Callable[[], DecodeAttempt]:
        return lambda: decoding_parse_json(source_label, candidate_text)

    @staticmethod
    def _decoder_fail(
        stage: str,
        error_message: str,
        stage_timeline: list[dict[str, object]],
        raw_text: str | None = None,
    ) -> DecodeOutcome:
        """Record a failed stage and build the error-carrying outcome."""

        logger.warning("BPJS response decode failed at stage=%s: %s", stage, error_message)
        stage_timeline.append(
            domain_build_stage_event(stage=stage, status=STAGE_STATUS_FAILED, details={"error": error_message})
        )
        payload: dict[str, Any] = {"error": error_message}
        if raw_text is not None:
            payload["text"] = raw_text
        return DecodeOutcome(payload=payload, failed_stage=stage, stage_timeline=stage_timeline)
