from decimal import Decimal, ROUND_HALF_UP

from bookandplay.core.config import settings

TWO_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_weekend(booking_date) -> bool:
    return booking_date.weekday() in (5, 6)  # Saturday-Sunday


def is_day_time(start_time) -> bool:
    return settings.DAY_START_HOUR <= start_time.hour < settings.DAY_END_HOUR


def hourly_rate(venue, booking_date, start_time, custom_pricing=None) -> Decimal:
    """
    Rate for one hour starting at start_time.

    Weekend/weekday charges win whenever they are set (> 0); otherwise the
    day or night charge applies. custom_pricing is a (day, night) pair from a
    special occasion and replaces the venue's day/night charges.
    """
    if custom_pricing is not None:
        day_rate, night_rate = (to_decimal(v) for v in custom_pricing)
    else:
        day_rate, night_rate = to_decimal(venue.day_charges), to_decimal(venue.night_charges)

    weekend_rate = to_decimal(venue.weekend_charges)
    weekday_rate = to_decimal(venue.weekday_charges)

    if is_weekend(booking_date):
        if weekend_rate > 0:
            return weekend_rate
    elif weekday_rate > 0:
        return weekday_rate

    return day_rate if is_day_time(start_time) else night_rate


def calculate_booking_price(venue, booking_date, slots, custom_pricing=None) -> Decimal:
    """Sum of hourly rates; every slot is exactly one hour."""
    total = Decimal("0")
    for slot in slots:
        total += hourly_rate(venue, booking_date, slot.start_time, custom_pricing)

    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
