"""LZ-string detection and decompression for decrypted plaintext."""

from __future__ import annotations

import re
from typing import Final

from lzstring import LZString

from .attempts import DecodeAttempt, decoding_failed, decoding_ok

# URI-component-safe LZ-string alphabet plus the percent/equals/underscore
# characters that appear when the payload was additionally URL-escaped.
_COMPRESSED_ALPHABET_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9%+\-=_$]+")


def decoding_looks_compressed(plaintext: str) -> bool:
    """Return whether plaintext consists only of LZ-string URI-safe characters.

    Args:
        plaintext: Decrypted text.

    Returns:
        bool: True when decompression should be attempted.
    """

    return bool(_COMPRESSED_ALPHABET_PATTERN.fullmatch(plaintext))


def decoding_lz_decompress(plaintext: str) -> DecodeAttempt:
    """Decompress an LZ-string `EncodedURIComponent` payload.

    Args:
        plaintext: Candidate compressed text.

    Returns:
        DecodeAttempt: `lz_string` attempt carrying the decompressed text.
    """

    # The lzstring port raises UnboundLocalError, KeyError and others on short or foreign input.
    try:
        decompressed = LZString().decompressFromEncodedURIComponent(plaintext)
    except Exception as error:  # pylint: disable=broad-exception-caught
        return decoding_failed("lz_string", f"decompression raised {type(error).__name__}")
    if not decompressed:
        return decoding_failed("lz_string", "decompression produced no output")
    return decoding_ok("lz_string", decompressed)
