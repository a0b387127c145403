"""HMAC-SHA256 request signing for the BPJS consumer authentication scheme."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from typing import Callable

from bpjs_queue.domain import Credentials, SignedRequest, SigningError

logger = logging.getLogger(__name__)


def adapter_sign(consumer_id: str, timestamp: str, secret_key: str) -> str:
    """Compute the BPJS request signature.

    The message is `consumer_id + "&" + timestamp` in UTF-8, keyed by the raw
    UTF-8 bytes of the secret key. The digest is encoded as standard padded
    base64.

    Args:
        consumer_id: BPJS consumer id.
        timestamp: Decimal string of unix epoch milliseconds.
        secret_key: Raw consumer secret.

    Returns:
        str: Base64 signature, valid only for this exact consumer id and timestamp.

    Raises:
        SigningError: Raised when the key is empty or HMAC computation fails.
    """

    if not isinstance(secret_key, str) or not secret_key:
        raise SigningError("secret key must be a non-empty string", error_code="empty_secret_key")
    if not isinstance(timestamp, str) or not timestamp.isdigit():
        raise SigningError("timestamp must be a decimal string of milliseconds", error_code="invalid_timestamp")

    message = f"{consumer_id}&{timestamp}"
    try:
        digest = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    except (TypeError, ValueError) as error:
        raise SigningError(str(error), error_code="hmac_failed") from error
    return base64.b64encode(digest).decode("ascii")


def adapter_current_timestamp(clock: Callable[[], float] | None = None) -> str:
    """Return the current unix time in milliseconds as a decimal string.

    Args:
        clock: Optional seconds-since-epoch provider; defaults to `time.time`.

    Returns:
        str: Millisecond timestamp.
    """

    current_seconds = (clock or time.time)()
    return str(int(current_seconds * 1000))


def adapter_build_signed_request(credentials: Credentials, timestamp: str) -> SignedRequest:
    """Sign one outbound request and assemble its header set.

    Args:
        credentials: BPJS credentials.
        timestamp: Fresh millisecond timestamp for this request only.

    Returns:
        SignedRequest: Timestamp, signature and outbound headers.

    Raises:
        SigningError: Raised when signature generation fails.
    """

    signature = adapter_sign(
        consumer_id=credentials.consumer_id,
        timestamp=timestamp,
        secret_key=credentials.secret_key,
    )
    logger.debug("Signed BPJS request timestamp=%s signature_prefix=%s", timestamp, signature[:10])
    return SignedRequest(
        timestamp=timestamp,
        signature=signature,
        headers={
            "x-cons-id": credentials.consumer_id,
            "x-timestamp": timestamp,
            "x-signature": signature,
            "user_key": credentials.user_key,
            "Content-Type": "application/json",
        },
    )
