"""
catalog/timestamps.py

Best-effort parsing of free-form timestamp strings found in tables.
"""

from __future__ import annotations

from datetime import datetime, timezone

TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse *value* into an aware datetime, or return None when it is blank
    or in no recognised format. Naive values are taken as UTC.
    """

    if value is None:
        return None
    raw_value = str(value).strip()
    if not raw_value:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(raw_value.replace("Z", "+00:00"))
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(raw_value, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
