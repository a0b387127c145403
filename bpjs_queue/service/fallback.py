"""Single decision table mapping failure classes to outward responses.

Error classes raised before the upstream call (configuration, request
validation, signing) surface as error bodies. Everything downstream of signing
degrades to HTTP 200 with a synthetic placeholder list, tagged both by the
`(Mock Data)` metadata suffix and by `degraded: true` on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from bpjs_queue.domain import MOCK_DATA_MARKER, EnvelopeMetadata, domain_build_placeholder_items

from .assembler import service_assemble_result
from .interfaces import QueueLookupResponse

logger = logging.getLogger(__name__)


class FailureClass(str, Enum):
    """Failure classes handled by the fallback policy."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_REQUEST = "invalid_request"
    SIGNING_FAILURE = "signing_failure"
    UPSTREAM_ERROR = "upstream_error"
    DECODE_FAILURE = "decode_failure"


@dataclass(frozen=True)
class FallbackRule:
    """Outward behavior for one failure class.

    Attributes:
        status_code: HTTP status returned to the caller.
        substitute_placeholder: True when a synthetic list replaces the payload.
        message_template: Error text template; `{reason}` is the failure detail.
    """

    status_code: int
    substitute_placeholder: bool
    message_template: str


FALLBACK_DECISION_TABLE: Final[dict[FailureClass, FallbackRule]] = {
    FailureClass.MISSING_CREDENTIALS: FallbackRule(500, False, "Missing BPJS API credentials"),
    FailureClass.INVALID_REQUEST: FallbackRule(400, False, "{reason}"),
    FailureClass.SIGNING_FAILURE: FallbackRule(500, False, "Failed to generate signature: {reason}"),
    FailureClass.UPSTREAM_ERROR: FallbackRule(200, True, "{reason}"),
    FailureClass.DECODE_FAILURE: FallbackRule(200, True, "{reason}"),
}

_MOCK_SUFFIX: Final[str] = f" ({MOCK_DATA_MARKER})"


class FallbackPolicy:
    """Apply the fallback decision table to one failure."""

    def __init__(self, decision_table: dict[FailureClass, FallbackRule] | None = None):
        """Initialize policy.

        Args:
            decision_table: Optional override of the default decision table.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when the table does not cover every failure class.
        """

        resolved_table = dict(decision_table or FALLBACK_DECISION_TABLE)
        uncovered = [failure_class.value for failure_class in FailureClass if failure_class not in resolved_table]
        if uncovered:
            raise ValueError(f"decision table missing failure classes: {', '.join(uncovered)}")
        self._decision_table = resolved_table

    def fallback_rule_for(self, failure_class: FailureClass) -> FallbackRule:
        """Return the rule registered for a failure class."""

        return self._decision_table[failure_class]

    def fallback_resolve(
        self,
        failure_class: FailureClass,
        reason: str,
        request_date: str | None = None,
        upstream_metadata: EnvelopeMetadata | None = None,
        raw_text: str | None = None,
    ) -> QueueLookupResponse:
        """Build the outward response for one failure.

        Args:
            failure_class: Classified failure.
            reason: Human-readable failure detail.
            request_date: Validated request date; required for placeholder substitution.
            upstream_metadata: Upstream metadata, when the envelope was readable.
            raw_text: Undecodable plaintext kept for diagnostics.

        Returns:
            QueueLookupResponse: Status code and JSON body.

        Raises:
            ValueError: Raised when a placeholder is required but request_date is missing.
        """

        rule = self.fallback_rule_for(failure_class)
        message = rule.message_template.format(reason=reason)

        if not rule.substitute_placeholder:
            logger.error("BPJS lookup rejected class=%s status=%s: %s", failure_class.value, rule.status_code, message)
            return QueueLookupResponse(status_code=rule.status_code, body={"error": message})

        if request_date is None:
            raise ValueError(f"request_date is required for failure class {failure_class.value}")

        logger.warning("BPJS lookup degraded to placeholder data class=%s: %s", failure_class.value, message)
        placeholder_payload: dict[str, Any] = {
            "list": domain_build_placeholder_items(request_date),
            "error": message,
        }
        if raw_text is not None:
            placeholder_payload["text"] = raw_text

        result = service_assemble_result(
            payload=placeholder_payload,
            metadata=self._fallback_synthetic_metadata(upstream_metadata),
            degraded=True,
        )
        return QueueLookupResponse(status_code=rule.status_code, body=result.domain_to_payload())

    @staticmethod
    def _fallback_synthetic_metadata(upstream_metadata: EnvelopeMetadata | None) -> EnvelopeMetadata:
        """Tag upstream metadata, or a default OK block, with the mock-data suffix."""

        if upstream_metadata is None:
            return EnvelopeMetadata(code=200, message=f"OK{_MOCK_SUFFIX}")
        if not upstream_metadata.code:
            return EnvelopeMetadata(code=200, message=f"OK{_MOCK_SUFFIX}", extra=upstream_metadata.extra)
        base_message = upstream_metadata.message or "OK"
        return EnvelopeMetadata(
            code=upstream_metadata.code,
            message=f"{base_message}{_MOCK_SUFFIX}",
            extra=upstream_metadata.extra,
        )
