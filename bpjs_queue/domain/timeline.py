"""Stage timeline helpers for decode and upstream diagnostics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Final

STAGE_STATUS_COMPLETED: Final[str] = "completed"
STAGE_STATUS_SKIPPED: Final[str] = "skipped"
STAGE_STATUS_FAILED: Final[str] = "failed"


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured stage event for a lookup timeline.

    Args:
        stage: Pipeline stage name, for example `base64` or `aes_cbc`.
        status: One of `completed`, `skipped` or `failed`.
        details: Optional diagnostics; must never contain secrets.

    Returns:
        dict[str, object]: Structured timeline event.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "recorded_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        event_payload["details"] = dict(details)
    return event_payload

