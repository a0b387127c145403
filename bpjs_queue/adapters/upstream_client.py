"""BPJS antrean web service client for queue-by-date retrieval."""

from __future__ import annotations

import logging
from typing import Final

import httpx

from bpjs_queue.config import DEFAULT_BPJS_QUEUE_BASE_URL
from bpjs_queue.domain import SignedRequest, UpstreamConnectionError, UpstreamTimeoutError

from .interfaces import UpstreamClientPort, UpstreamFetchResult

logger = logging.getLogger(__name__)


class BpjsUpstreamClient(UpstreamClientPort):
    """Adapter implementation for the BPJS `pendaftaran/tanggal/{date}` endpoint."""

    _USER_AGENT: Final[str] = "bpjs-queue-adapter/1.0 (Python/httpx)"

    def __init__(
        self,
        base_url: str = DEFAULT_BPJS_QUEUE_BASE_URL,
        request_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize BPJS upstream client.

        Args:
            base_url: Queue-by-date endpoint without the trailing date segment.
            request_timeout_seconds: HTTP request timeout in seconds.
            transport: Optional httpx transport, used to stub the network in tests.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._base_url = normalized_base_url.rstrip("/")
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport

    def adapter_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier.
        """

        return "bpjs_antreanrs"

    def adapter_build_url(self, date: str) -> str:
        """Embed the date verbatim into the endpoint path.

        Args:
            date: Validated request date.

        Returns:
            str: Full upstream URL.
        """

        return f"{self._base_url}/{date}"

    def adapter_fetch(self, date: str, signed_request: SignedRequest) -> UpstreamFetchResult:
        """Execute one signed GET and return status and body untouched.

        Args:
            date: Validated `YYYY-MM-DD` request date.
            signed_request: Signed header set for this request only.

        Returns:
            UpstreamFetchResult: Raw status code and body text.

        Raises:
            UpstreamTimeoutError: Raised when the transport times out.
            UpstreamConnectionError: Raised for any other transport failure.
        """

        request_url = self.adapter_build_url(date)
        request_headers = {"User-Agent": self._USER_AGENT, **signed_request.headers}
        logger.debug("GET %s", request_url)
        try:
            with httpx.Client(timeout=self._request_timeout_seconds, transport=self._transport) as client:
                response = client.get(request_url, headers=request_headers)
        except httpx.TimeoutException as error:
            raise UpstreamTimeoutError("BPJS transport request timed out", error_code="timeout") from error
        except httpx.TransportError as error:
            raise UpstreamConnectionError(
                f"BPJS transport request failed: {error}", error_code="transport_error"
            ) from error

        logger.info("BPJS responded status=%s bytes=%s", response.status_code, len(response.content))
        return UpstreamFetchResult(status_code=response.status_code, body_text=response.text)
