"""Decoding package for BPJS envelope parsing and response decryption."""

from .attempts import (
    DecodeAttempt,
    DecodeSelection,
    decoding_base64_text,
    decoding_ciphertext_routes,
    decoding_first_success,
    decoding_hex_bytes,
    decoding_latin1_bytes,
)
from .cipher import decoding_aes_decrypt, decoding_derive_key_material, decoding_encrypt_payload
from .compression import decoding_looks_compressed, decoding_lz_decompress
from .envelope import decoding_parse_envelope, decoding_parse_metadata
from .response_decoder import PARSE_FAILED_MESSAGE, DecodeOutcome, ResponseDecoder

__all__ = [
    "DecodeAttempt",
    "DecodeOutcome",
    "DecodeSelection",
    "PARSE_FAILED_MESSAGE",
    "ResponseDecoder",
    "decoding_aes_decrypt",
    "decoding_base64_text",
    "decoding_ciphertext_routes",
    "decoding_derive_key_material",
    "decoding_encrypt_payload",
    "decoding_first_success",
    "decoding_hex_bytes",
    "decoding_latin1_bytes",
    "decoding_looks_compressed",
    "decoding_lz_decompress",
    "decoding_parse_envelope",
    "decoding_parse_metadata",
]
