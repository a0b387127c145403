"""Synthetic queue items used when real upstream data is unavailable."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Final

from .models import QUEUE_ITEM_FIELDS

MOCK_DATA_MARKER: Final[str] = "Mock Data"
# Western Indonesia Time has no daylight saving.
_SERVICE_TIMEZONE: Final[timezone] = timezone(timedelta(hours=7), "WIB")
_PLACEHOLDER_SERVICE_START: Final[time] = time(hour=8)


def domain_build_placeholder_items(request_date: str) -> list[dict[str, object]]:
    """Build the synthetic single-item queue list for one requested date.

    The item carries every queue field so list renderers never hit a missing
    key, and its `status` and `sumberdata` fields carry the mock-data marker.

    Args:
        request_date: Validated `YYYY-MM-DD` date string.

    Returns:
        list[dict[str, object]]: One-element list with a synthetic queue item.

    Raises:
        ValueError: Raised when request_date is not an ISO calendar date.
    """

    service_day = date.fromisoformat(request_date)
    service_start = datetime.combine(service_day, _PLACEHOLDER_SERVICE_START, tzinfo=_SERVICE_TIMEZONE)
    service_start_ms = int(service_start.timestamp() * 1000)

    placeholder_item: dict[str, object] = {
        "kodebooking": f"MOCK{service_day.strftime('%Y%m%d')}",
        "tanggal": request_date,
        "kodepoli": "INT",
        "kodedokter": 0,
        "jampraktek": "08:00-16:00",
        "nik": "0000000000000000",
        "nokapst": "0000000000000",
        "nohp": "000000000000",
        "norekammedis": "000000",
        "jeniskunjungan": 1,
        "nomorreferensi": "-",
        "sumberdata": MOCK_DATA_MARKER,
        "ispeserta": 0,
        "noantrean": "INT-0000",
        "estimasidilayani": service_start_ms,
        "createdtime": service_start_ms,
        "status": f"Belum dilayani ({MOCK_DATA_MARKER})",
    }
    return [{field_name: placeholder_item[field_name] for field_name in QUEUE_ITEM_FIELDS}]
