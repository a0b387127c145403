"""Queue lookup orchestration: validate, sign, fetch, decode, assemble."""

from __future__ import annotations

import json
import logging
import re
import time
from datetime import date
from typing import Callable, Final

from bpjs_queue.adapters import (
    UpstreamClientPort,
    UpstreamFetchResult,
    adapter_build_signed_request,
    adapter_current_timestamp,
)
from bpjs_queue.decoding import ResponseDecoder, decoding_parse_envelope
from bpjs_queue.domain import (
    Credentials,
    EnvelopeFormatError,
    EnvelopeMetadata,
    RequestValidationError,
    SigningError,
    UpstreamError,
)

from .assembler import service_assemble_result
from .fallback import FailureClass, FallbackPolicy
from .interfaces import QueueLookupPort, QueueLookupResponse

logger = logging.getLogger(__name__)

_ISO_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_REQUIRED_MESSAGE: Final[str] = "Date parameter is required"
DATE_FORMAT_MESSAGE: Final[str] = "Date must use YYYY-MM-DD format"


def service_validate_request_date(request_date: object) -> str:
    """Validate a requested queue date.

    Args:
        request_date: Candidate date value from the request body.

    Returns:
        str: The date string, stripped of surrounding whitespace.

    Raises:
        RequestValidationError: Raised when the date is missing or not a real `YYYY-MM-DD` date.
    """

    if not isinstance(request_date, str) or not request_date.strip():
        raise RequestValidationError(DATE_REQUIRED_MESSAGE, error_code="date_required")

    normalized_date = request_date.strip()
    if not _ISO_DATE_PATTERN.match(normalized_date):
        raise RequestValidationError(DATE_FORMAT_MESSAGE, error_code="date_format")
    try:
        date.fromisoformat(normalized_date)
    except ValueError as error:
        raise RequestValidationError(DATE_FORMAT_MESSAGE, error_code="date_format") from error
    return normalized_date


def service_parse_request_date(raw_body: bytes) -> str:
    """Extract and validate `date` from a raw JSON request body.

    Args:
        raw_body: Raw request body bytes.

    Returns:
        str: Validated date string.

    Raises:
        RequestValidationError: Raised when the body is not a JSON object or the date is invalid.
    """

    if not raw_body.strip():
        raise RequestValidationError(DATE_REQUIRED_MESSAGE, error_code="date_required")
    try:
        body = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise RequestValidationError("Invalid JSON body", error_code="invalid_json") from error
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object", error_code="invalid_body")
    return service_validate_request_date(body.get("date"))


class QueueLookupService(QueueLookupPort):
    """Linear, stateless-per-call lookup of the BPJS clinic queue for one date."""

    def __init__(
        self,
        credentials: Credentials | None,
        upstream_client: UpstreamClientPort,
        fallback_policy: FallbackPolicy | None = None,
        clock: Callable[[], float] | None = None,
        retry_attempts: int = 1,
        retry_backoff_seconds: float = 0.5,
    ):
        """Initialize lookup service.

        Args:
            credentials: Resolved credentials, or None when configuration lacks them.
            upstream_client: BPJS upstream client port.
            fallback_policy: Optional fallback policy override.
            clock: Optional seconds-since-epoch provider used for request timestamps.
            retry_attempts: Total upstream attempts for transport failures and 5xx responses.
            retry_backoff_seconds: Delay between upstream attempts.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when retry settings are invalid.
        """

        if upstream_client is None:
            raise ValueError("upstream_client must not be None")
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be >= 1")
        if retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds must be >= 0")

        self._credentials = credentials
        self._upstream_client = upstream_client
        self._fallback_policy = fallback_policy or FallbackPolicy()
        self._clock = clock
        self._retry_attempts = retry_attempts
        self._retry_backoff_seconds = retry_backoff_seconds

    @property
    def credentials_configured(self) -> bool:
        """Return whether BPJS credentials were resolved at startup."""

        return self._credentials is not None

    def service_handle_request(self, raw_body: bytes) -> QueueLookupResponse:
        """Handle one raw inbound JSON body `{date}`.

        Credentials are checked before the body is read.

        Args:
            raw_body: Raw request body bytes.

        Returns:
            QueueLookupResponse: Status code and JSON body.
        """

        if self._credentials is None:
            return self._fallback_policy.fallback_resolve(FailureClass.MISSING_CREDENTIALS, reason="credentials unset")
        try:
            request_date = service_parse_request_date(raw_body)
        except RequestValidationError as error:
            return self._fallback_policy.fallback_resolve(FailureClass.INVALID_REQUEST, reason=str(error))
        return self._service_lookup_validated(request_date, self._credentials)

    def service_lookup_queue(self, request_date: object) -> QueueLookupResponse:
        """Look up the queue for one date value.

        Args:
            request_date: Candidate `YYYY-MM-DD` date.

        Returns:
            QueueLookupResponse: Status code and JSON body.
        """

        if self._credentials is None:
            return self._fallback_policy.fallback_resolve(FailureClass.MISSING_CREDENTIALS, reason="credentials unset")
        try:
            validated_date = service_validate_request_date(request_date)
        except RequestValidationError as error:
            return self._fallback_policy.fallback_resolve(FailureClass.INVALID_REQUEST, reason=str(error))
        return self._service_lookup_validated(validated_date, self._credentials)

    def _service_lookup_validated(self, request_date: str, credentials: Credentials) -> QueueLookupResponse:
        """Run sign, fetch, decode and assemble for a validated date."""

        try:
            fetch_result = self._service_fetch_with_retry(request_date, credentials)
        except SigningError as error:
            return self._fallback_policy.fallback_resolve(FailureClass.SIGNING_FAILURE, reason=str(error))
        except UpstreamError as error:
            return self._fallback_policy.fallback_resolve(
                FailureClass.UPSTREAM_ERROR,
                reason=f"BPJS API unreachable: {error}",
                request_date=request_date,
            )

        if not fetch_result.is_success:
            logger.error("BPJS API error status=%s body=%s", fetch_result.status_code, fetch_result.body_text[:500])
            return self._fallback_policy.fallback_resolve(
                FailureClass.UPSTREAM_ERROR,
                reason=f"BPJS API error: {fetch_result.status_code}",
                request_date=request_date,
            )

        try:
            envelope = decoding_parse_envelope(fetch_result.body_text)
        except EnvelopeFormatError as error:
            upstream_metadata = error.metadata if isinstance(error.metadata, EnvelopeMetadata) else None
            return self._fallback_policy.fallback_resolve(
                FailureClass.UPSTREAM_ERROR,
                reason=str(error),
                request_date=request_date,
                upstream_metadata=upstream_metadata,
            )

        if envelope.metadata is None:
            logger.info("BPJS envelope carried no metadata")
        else:
            logger.info("BPJS envelope metadata code=%s message=%s", envelope.metadata.code, envelope.metadata.message)
        decode_outcome = ResponseDecoder(credentials).decoder_decode(envelope.response)
        if not decode_outcome.succeeded:
            logger.warning(
                "BPJS response decode degraded failed_stage=%s stage_timeline=%s",
                decode_outcome.failed_stage,
                decode_outcome.stage_timeline,
            )
            return self._fallback_policy.fallback_resolve(
                FailureClass.DECODE_FAILURE,
                reason=decode_outcome.error_message or "decode failed",
                request_date=request_date,
                upstream_metadata=envelope.metadata,
                raw_text=decode_outcome.payload.get("text"),
            )

        result = service_assemble_result(payload=decode_outcome.payload, metadata=envelope.metadata)
        return QueueLookupResponse(status_code=200, body=result.domain_to_payload())

    def _service_fetch_with_retry(self, request_date: str, credentials: Credentials) -> UpstreamFetchResult:
        """Fetch with optional retry, re-signing every attempt.

        Returns:
            UpstreamFetchResult: Last upstream result.

        Raises:
            SigningError: Raised when the request cannot be signed.
            UpstreamError: Raised when the final attempt fails at transport level.
        """

        for attempt_index in range(self._retry_attempts):
            is_last_attempt = attempt_index == self._retry_attempts - 1
            signed_request = adapter_build_signed_request(credentials, adapter_current_timestamp(self._clock))
            logger.info(
                "Requesting BPJS queue source=%s date=%s attempt=%s/%s",
                self._upstream_client.adapter_source_name(),
                request_date,
                attempt_index + 1,
                self._retry_attempts,
            )
            try:
                fetch_result = self._upstream_client.adapter_fetch(request_date, signed_request)
            except UpstreamError as error:
                if is_last_attempt:
                    raise
                logger.warning("BPJS attempt %s failed, retrying: %s", attempt_index + 1, error)
            else:
                if fetch_result.status_code < 500 or is_last_attempt:
                    return fetch_result
                logger.warning("BPJS attempt %s returned %s, retrying", attempt_index + 1, fetch_result.status_code)

            if self._retry_backoff_seconds > 0:
                time.sleep(self._retry_backoff_seconds)

        raise RuntimeError("retry loop exited without a result")
