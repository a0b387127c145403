"""Explicit ordered decode attempts.

Every interpretation of an ambiguous value is a named attempt that returns a
`DecodeAttempt` instead of raising. Callers list attempts in a fixed order and
`decoding_first_success` picks the first one that produced a value.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Callable, Final, Sequence

_HEX_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9a-fA-F]+")
_ASCII_WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"[\t\n\f\r ]+")


@dataclass(frozen=True)
class DecodeAttempt:
    """Outcome of one decode interpretation.

    Attributes:
        label: Interpretation name, for example `base64` or `hex`.
        value: Decoded value when the attempt succeeded.
        reason: Failure reason when the attempt did not succeed.
    """

    label: str
    value: Any = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the attempt produced a value."""

        return self.reason is None


@dataclass(frozen=True)
class DecodeSelection:
    """Result of evaluating an ordered attempt list.

    Attributes:
        selected: First successful attempt, or None when all failed.
        rejected: Failed attempts in evaluation order.
    """

    selected: DecodeAttempt | None
    rejected: tuple[DecodeAttempt, ...]

    def decoding_rejection_summary(self) -> str:
        """Join rejected attempt reasons for logs and error payloads."""

        return "; ".join(f"{attempt.label}: {attempt.reason}" for attempt in self.rejected)


def decoding_ok(label: str, value: Any) -> DecodeAttempt:
    """Build a successful attempt."""

    return DecodeAttempt(label=label, value=value)


def decoding_failed(label: str, reason: str) -> DecodeAttempt:
    """Build a failed attempt with a non-empty reason."""

    return DecodeAttempt(label=label, reason=reason or "unknown failure")


def decoding_first_success(attempts: Sequence[Callable[[], DecodeAttempt]]) -> DecodeSelection:
    """Evaluate attempts lazily in order and stop at the first success.

    Args:
        attempts: Zero-argument callables, each returning one `DecodeAttempt`.

    Returns:
        DecodeSelection: Winning attempt (if any) plus every rejected attempt.
    """

    rejected: list[DecodeAttempt] = []
    for attempt_factory in attempts:
        attempt = attempt_factory()
        if attempt.succeeded:
            return DecodeSelection(selected=attempt, rejected=tuple(rejected))
        rejected.append(attempt)
    return DecodeSelection(selected=None, rejected=tuple(rejected))


def decoding_base64_text(encoded_text: str) -> DecodeAttempt:
    """Decode forgiving standard base64 into a latin-1 text, one char per byte.

    Follows the browser `atob` rules: ASCII whitespace anywhere is ignored and
    missing `=` padding is restored. Characters outside the standard alphabet
    still fail the attempt.

    Args:
        encoded_text: Candidate base64 text.

    Returns:
        DecodeAttempt: `base64` attempt carrying the decoded text.
    """

    compact_text = _ASCII_WHITESPACE_PATTERN.sub("", encoded_text)
    if len(compact_text) % 4 == 1:
        return decoding_failed("base64", "invalid base64: length leaves a dangling character")
    padded_text = compact_text + "=" * (-len(compact_text) % 4)

    try:
        decoded_bytes = base64.b64decode(padded_text, validate=True)
    except (binascii.Error, ValueError) as error:
        return decoding_failed("base64", f"invalid base64: {error}")
    return decoding_ok("base64", decoded_bytes.decode("latin-1"))


def decoding_hex_bytes(candidate_text: str) -> DecodeAttempt:
    """Decode a clean hex string into bytes.

    Args:
        candidate_text: Text that may be an even-length hex string.

    Returns:
        DecodeAttempt: `hex` attempt carrying the decoded bytes.
    """

    stripped_text = candidate_text.strip()
    if len(stripped_text) % 2 != 0:
        return decoding_failed("hex", "odd-length hex string")
    if not _HEX_PATTERN.fullmatch(stripped_text):
        return decoding_failed("hex", "non-hex characters present")
    return decoding_ok("hex", bytes.fromhex(stripped_text))


def decoding_latin1_bytes(candidate_text: str) -> DecodeAttempt:
    """Map each character code unit to one byte.

    Args:
        candidate_text: Text whose characters are all below U+0100.

    Returns:
        DecodeAttempt: `latin1` attempt carrying the raw bytes.
    """

    try:
        return decoding_ok("latin1", candidate_text.encode("latin-1"))
    except UnicodeEncodeError as error:
        return decoding_failed("latin1", f"character outside single-byte range: {error.reason}")


def decoding_ciphertext_routes(encrypted_text: str) -> list[Callable[[], DecodeAttempt]]:
    """Return the ordered interpretations of the encrypted `response` field.

    Routes, in order:
        1. `base64+hex`: base64 text that itself holds a hex string.
        2. `base64+latin1`: base64 text holding raw binary.
        3. `hex`: the field is a bare hex string. Even-length hex is also
           valid base64, so this route only wins after the base64 routes fail
           to decrypt.

    Each route yields ciphertext bytes or a failed attempt; none raises.

    Args:
        encrypted_text: Envelope `response` field.

    Returns:
        list[Callable[[], DecodeAttempt]]: Lazily evaluated route attempts.
    """

    base64_attempt = decoding_base64_text(encrypted_text)

    def _base64_route(label: str, second_stage: Callable[[str], DecodeAttempt]) -> Callable[[], DecodeAttempt]:
        def _attempt() -> DecodeAttempt:
            if not base64_attempt.succeeded:
                return decoding_failed(label, str(base64_attempt.reason))
            resolved = second_stage(base64_attempt.value)
            if not resolved.succeeded:
                return decoding_failed(label, str(resolved.reason))
            return decoding_ok(label, resolved.value)

        return _attempt

    def _bare_hex() -> DecodeAttempt:
        return decoding_hex_bytes(encrypted_text)

    return [
        _base64_route("base64+hex", decoding_hex_bytes),
        _base64_route("base64+latin1", decoding_latin1_bytes),
        _bare_hex,
    ]
