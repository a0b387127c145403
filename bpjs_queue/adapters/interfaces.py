"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from bpjs_queue.domain import SignedRequest


@dataclass(frozen=True)
class UpstreamFetchResult:
    """Raw upstream outcome, uninterpreted.

    Attributes:
        status_code: HTTP status code returned by BPJS.
        body_text: Raw response body text.
    """

    status_code: int
    body_text: str

    @property
    def is_success(self) -> bool:
        """Return whether the status code is 2xx."""

        return 200 <= self.status_code < 300


class UpstreamClientPort(Protocol):
    """Port definition for fetching one queue-by-date response from BPJS."""

    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics.

        Returns:
            str: Human-readable upstream source identifier.
        """

    def adapter_fetch(self, date: str, signed_request: SignedRequest) -> UpstreamFetchResult:
        """Issue one authenticated GET for the given date.

        Args:
            date: Validated `YYYY-MM-DD` date embedded in the request path.
            signed_request: Fresh signed header set for this request only.

        Returns:
            UpstreamFetchResult: Raw status code and body text.

        Raises:
            UpstreamConnectionError: Raised when the upstream connection fails.
            UpstreamTimeoutError: Raised when the request exceeds the timeout.
        """
