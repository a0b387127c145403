"""Response assembly for the outward adapter contract."""

from __future__ import annotations

from typing import Any

from bpjs_queue.domain import AdapterResult, EnvelopeMetadata


def service_assemble_result(
    payload: dict[str, Any],
    metadata: EnvelopeMetadata | None,
    degraded: bool = False,
) -> AdapterResult:
    """Merge a decoded or fallback payload with its metadata.

    Args:
        payload: Decoded payload or synthetic placeholder payload.
        metadata: Metadata from whichever stage produced the payload, None when upstream sent none.
        degraded: True when the payload is synthetic.

    Returns:
        AdapterResult: Outward result contract.
    """

    return AdapterResult(response=payload, metadata=metadata, degraded=degraded)
