"""Service layer for queue lookup orchestration and fallback handling."""

from .assembler import service_assemble_result
from .fallback import FALLBACK_DECISION_TABLE, FailureClass, FallbackPolicy, FallbackRule
from .interfaces import QueueLookupPort, QueueLookupResponse
from .queue_lookup import (
    DATE_FORMAT_MESSAGE,
    DATE_REQUIRED_MESSAGE,
    QueueLookupService,
    service_parse_request_date,
    service_validate_request_date,
)

__all__ = [
    "DATE_FORMAT_MESSAGE",
    "DATE_REQUIRED_MESSAGE",
    "FALLBACK_DECISION_TABLE",
    "FailureClass",
    "FallbackPolicy",
    "FallbackRule",
    "QueueLookupPort",
    "QueueLookupResponse",
    "QueueLookupService",
    "service_assemble_result",
    "service_parse_request_date",
    "service_validate_request_date",
]
