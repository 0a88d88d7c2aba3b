# core/clock.py

"""
CLOCK

Discount validity windows, order numbers and ledger timestamps all depend on
"now". Services take an optional `clock` and fall back to the system clock, so
tests can pin time with FixedClock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone

from django.utils import timezone


class SystemClock:
    def now(self) -> datetime:
        return timezone.now()


class FixedClock:
    """Clock frozen at a given aware datetime. Can be moved forward explicitly."""

    def __init__(self, at: datetime):
        if timezone.is_naive(at):
            at = timezone.make_aware(at, dt_timezone.utc)
        self.at = at

    def now(self) -> datetime:
        return self.at

    def advance(self, **kwargs) -> datetime:
        self.at = self.at + timedelta(**kwargs)
        return self.at


system_clock = SystemClock()


def resolve_clock(clock=None):
    return clock if clock is not None else system_clock
