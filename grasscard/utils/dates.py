# grasscard/utils/dates.py
"""
Civil date keys ("YYYY-MM-DD") for one fixed timezone.

Days are bucketed in the deployment timezone rather than UTC, so a workout
logged at 08:00 in Tokyo lands on the Tokyo calendar day.
"""
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

YMD_FORMAT = "%Y-%m-%d"


def parse_ymd(ymd: str) -> date:
    """Strict YYYY-MM-DD parse; raises ValueError on anything else."""
    if not isinstance(ymd, str) or len(ymd) != 10:
        raise ValueError(f"invalid date key: {ymd!r}")
    return datetime.strptime(ymd, YMD_FORMAT).date()


def today_ymd(tz_name: str = "Asia/Tokyo", now: Optional[datetime] = None) -> str:
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).strftime(YMD_FORMAT)


def add_days(ymd: str, delta: int) -> str:
    return (parse_ymd(ymd) + timedelta(days=delta)).strftime(YMD_FORMAT)


def grid_dates(today: str, weeks: int = 24) -> List[str]:
    """
    The weeks*7 consecutive date keys ending at `today`, oldest first.
    """
    total_days = max(1, int(weeks)) * 7
    start = parse_ymd(today) - timedelta(days=total_days - 1)
    return [
        (start + timedelta(days=i)).strftime(YMD_FORMAT)
        for i in range(total_days)
    ]
