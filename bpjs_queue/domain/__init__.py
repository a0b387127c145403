"""Domain models used across application layer boundaries."""

from .errors import (
    BpjsAdapterError,
    ConfigurationError,
    EnvelopeFormatError,
    RequestValidationError,
    SigningError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .models import (
    QUEUE_ITEM_FIELDS,
    AdapterResult,
    Credentials,
    EncryptedEnvelope,
    EnvelopeMetadata,
    SignedRequest,
)
from .placeholder import MOCK_DATA_MARKER, domain_build_placeholder_items
from .timeline import (
    STAGE_STATUS_COMPLETED,
    STAGE_STATUS_FAILED,
    STAGE_STATUS_SKIPPED,
    domain_build_stage_event,
)

__all__ = [
    "AdapterResult",
    "BpjsAdapterError",
    "ConfigurationError",
    "Credentials",
    "EncryptedEnvelope",
    "EnvelopeFormatError",
    "EnvelopeMetadata",
    "MOCK_DATA_MARKER",
    "QUEUE_ITEM_FIELDS",
    "RequestValidationError",
    "STAGE_STATUS_COMPLETED",
    "STAGE_STATUS_FAILED",
    "STAGE_STATUS_SKIPPED",
    "SignedRequest",
    "SigningError",
    "UpstreamConnectionError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "domain_build_placeholder_items",
    "domain_build_stage_event",
]
