from __future__ import annotations

from datetime import datetime, timezone


def parse_timestamp(value) -> datetime | None:
    """Parse backend ISO timestamps ('Z' suffix included) into aware datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def format_downtime(stopped_at, now: datetime | None = None) -> str:
    """Elapsed time since a process stop, as 'Xh Ym' or 'Ym'."""
    started = parse_timestamp(stopped_at)
    if started is None:
        return "N/A"
    minutes = max(0, int((_now(now) - started).total_seconds() // 60))
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def format_time_ago(created_at, now: datetime | None = None) -> str:
    ts = parse_timestamp(created_at)
    if ts is None:
        return ""
    seconds = int((_now(now) - ts).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 7 * 86400:
        return f"{seconds // 86400}d ago"
    return ts.date().isoformat()


def format_qty(value, *, decimals: int = 0) -> str:
    try:
        num = float(value or 0)
    except (TypeError, ValueError):
        return str(value)
    return f"{num:,.{decimals}f}"


def format_datetime(value) -> str:
    ts = parse_timestamp(value)
    if ts is None:
        return "-"
    return ts.strftime("%d-%m-%Y %H:%M")
