"""Typed interfaces for service-layer responsibilities."""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class QueueLookupResponse:
    """HTTP-agnostic outcome of one queue lookup.

    Attributes:
        status_code: HTTP status the caller should receive.
        body: JSON body, either an `AdapterResult` payload or `{error}`.
    """

    status_code: int
    body: dict[str, Any]


class QueueLookupPort(Protocol):
    """Port definition consumed by the API and CLI surfaces."""

    @property
    def credentials_configured(self) -> bool:
        """Return whether BPJS credentials were resolved at startup."""

    def service_handle_request(self, raw_body: bytes) -> QueueLookupResponse:
        """Handle one raw inbound JSON body `{date}`.

        Args:
            raw_body: Raw request body bytes.

        Returns:
            QueueLookupResponse: Status code and JSON body.
        """

    def service_lookup_queue(self, request_date: object) -> QueueLookupResponse:
        """Look up the queue for one date value.

        Args:
            request_date: Candidate `YYYY-MM-DD` date.

        Returns:
            QueueLookupResponse: Status code and JSON body.
        """
