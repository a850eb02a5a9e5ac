"""Date helpers pinned to Korea Standard Time (UTC+9)."""

from datetime import date, datetime, timedelta, timezone

KST = timezone(timedelta(hours=9), name="KST")

_WEEKDAYS_KO = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")


def now_kst() -> datetime:
    return datetime.now(KST)


def get_today_date(now: datetime | None = None) -> str:
    """Return today's date in KST as YYYY-MM-DD."""
    current = (now or now_kst()).astimezone(KST)
    return current.date().isoformat()


def get_yesterday_date(now: datetime | None = None) -> str:
    """Return yesterday's date in KST as YYYY-MM-DD."""
    current = (now or now_kst()).astimezone(KST)
    return (current.date() - timedelta(days=1)).isoformat()


def parse_date(date_str: str) -> date:
    """Parse a YYYY-MM-DD string into a calendar date.

    Raises:
        ValueError: If the string is not a valid calendar date.
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date format: {date_str}. Use YYYY-MM-DD")


def format_korean_date(date_str: str) -> str:
    """Format YYYY-MM-DD as a long Korean date, e.g. '2025년 1월 15일 수요일'."""
    day = parse_date(date_str)
    return f"{day.year}년 {day.month}월 {day.day}일 {_WEEKDAYS_KO[day.weekday()]}"


def format_korean_timestamp(moment: datetime | None = None) -> str:
    """Format a moment in KST the way ko-KR locales print timestamps.

    Example: '2025. 1. 15. 오후 3:04:05'
    """
    current = (moment or now_kst()).astimezone(KST)
    meridiem = "오전" if current.hour < 12 else "오후"
    hour = current.hour % 12 or 12
    return (
        f"{current.year}. {current.month}. {current.day}. "
        f"{meridiem} {hour}:{current.minute:02d}:{current.second:02d}"
    )
