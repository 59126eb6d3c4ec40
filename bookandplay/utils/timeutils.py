from datetime import date, time, timedelta


def day_of_week(d: date) -> int:
    """Weekday number as stored on venues: 0 = Sunday ... 6 = Saturday."""
    return (d.weekday() + 1) % 7


def parse_time(value) -> time:
    if isinstance(value, time):
        return value
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time: {value!r}")
    return time(int(parts[0]), int(parts[1]), int(parts[2]) if len(parts) > 2 else 0)


def hour_slot(hour: int) -> tuple[time, time]:
    return time(hour, 0), time(hour + 1, 0)


def daterange(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def format_booking_date(d: date) -> str:
    return d.strftime("%a, %d %b %Y")
