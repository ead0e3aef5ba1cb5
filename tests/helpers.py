from datetime import date, timedelta


def next_weekday(weekday: int, start: date | None = None) -> date:
    """First date strictly after ``start`` (default today) falling on ``weekday`` (0 = Monday)."""
    start = start or date.today()
    days = (weekday - start.weekday()) % 7 or 7
    return start + timedelta(days=days)
