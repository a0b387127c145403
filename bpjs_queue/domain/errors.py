"""Project-native typed exceptions for BPJS adapter failures."""

from __future__ import annotations


class BpjsAdapterError(Exception):
    """Base exception for adapter-level BPJS failures.

    Attributes:
        error_code: Optional machine-readable failure code.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigurationError(BpjsAdapterError, RuntimeError):
    """Required BPJS credentials are absent from process configuration."""


class RequestValidationError(BpjsAdapterError, ValueError):
    """Inbound request body or date parameter is missing or malformed."""


class SigningError(BpjsAdapterError, ValueError):
    """HMAC signature could not be produced for an outbound request."""


class UpstreamError(BpjsAdapterError):
    """Upstream BPJS call failed or returned an unusable response."""


class UpstreamConnectionError(UpstreamError, ConnectionError):
    """Transport-level connectivity failure during BPJS API communication."""


class UpstreamTimeoutError(UpstreamError, TimeoutError):
    """Transport timeout while waiting for BPJS API response."""


class EnvelopeFormatError(UpstreamError, ValueError):
    """Upstream body is not a JSON envelope with a usable `response` field.

    Attributes:
        metadata: Upstream metadata block when the envelope carried one.
    """

    def __init__(self, message: str, error_code: str | None = None, metadata: object | None = None):
        super().__init__(message=message, error_code=error_code)
        self.metadata = metadata
