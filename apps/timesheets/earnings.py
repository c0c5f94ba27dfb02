"""Worked hours and pay for a shift.

Pure functions over Decimal. Money is rounded half-up to cents so the same
shift always bills the same amount.
"""
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
SECONDS_PER_HOUR = Decimal(3600)


def round_money(value):
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def worked_duration(clock_in_at, clock_out_at, break_minutes=0):
    """Time on the clock minus the break, never negative."""
    worked = (clock_out_at - clock_in_at) - timedelta(minutes=break_minutes or 0)
    return max(worked, timedelta(0))


def worked_hours(shift):
    """Hours worked on a closed shift; zero while the shift is still open."""
    if shift.clock_out_at is None:
        return Decimal('0')
    duration = worked_duration(shift.clock_in_at, shift.clock_out_at, shift.break_minutes)
    return Decimal(str(duration.total_seconds())) / SECONDS_PER_HOUR


def earnings_for_hours(hours, hourly_rate):
    return round_money(Decimal(str(hours)) * Decimal(str(hourly_rate)))


def earnings(shift, hourly_rate):
    return earnings_for_hours(worked_hours(shift), hourly_rate)
