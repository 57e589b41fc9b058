"""
시간 표시 유틸리티
API의 UTC 타임스탬프(나노초 정밀도 포함)를 화면용 문자열로 변환
"""

from datetime import datetime

import pandas as pd

INVALID_DATE = "Invalid date"


def parse_timestamp(value: str | None) -> pd.Timestamp | None:
    """ISO 8601 문자열을 UTC Timestamp로 변환 (실패 시 None)

    타임존이 없는 값은 UTC로 간주한다.
    """
    if not value:
        return None
    try:
        ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    return ts


def _now_utc(now: datetime | None) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    ts = pd.Timestamp(now)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def time_ago(value: str | None, now: datetime | None = None) -> str:
    """최근 입장/퇴장 시각을 '몇 분 전' 형태로 표시"""
    ts = parse_timestamp(value)
    if ts is None:
        return INVALID_DATE

    seconds = int((_now_utc(now) - ts).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "Just now"
    if minutes < 2:
        return "1 minute ago"
    if minutes <= 4:
        return "1 to 4 minutes ago"
    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 2:
        return "1 hour ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days == 1:
        return "Yesterday"
    return format_short_date(value)


def format_short_date(value: str | None) -> str:
    """예: May 16, 2025"""
    ts = parse_timestamp(value)
    if ts is None:
        return INVALID_DATE
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"


def format_datetime(value: str | None) -> str:
    """예: 2025-05-16 10:08:04 UTC"""
    ts = parse_timestamp(value)
    if ts is None:
        return INVALID_DATE
    return ts.strftime("%Y-%m-%d %H:%M:%S UTC")
