# country_info/utils/time_converter.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence
import re

# REST Countries offsets look like "UTC", "UTC+05:30", "UTC-03:00"
_OFFSET_RE = re.compile(r"^UTC(?:([+-])(\d{2}):(\d{2}))?$")


def parse_utc_offset(raw: str) -> Optional[timezone]:
    m = _OFFSET_RE.match((raw or "").strip())
    if not m:
        return None
    sign, hh, mm = m.groups()
    if sign is None:
        return timezone.utc
    delta = timedelta(hours=int(hh), minutes=int(mm))
    return timezone(-delta if sign == "-" else delta)


def format_clock(moment: datetime) -> str:
    """12-hour wall clock, e.g. '3:07 PM'."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def current_time(timezones: Optional[Sequence[str]], now: Optional[datetime] = None) -> str:
    """Local time at the first offset in `timezones`, or 'N/A'."""
    if not timezones:
        return "N/A"
    tz = parse_utc_offset(timezones[0])
    if tz is None:
        return "N/A"
    now = now or datetime.now(timezone.utc)
    return format_clock(now.astimezone(tz))
