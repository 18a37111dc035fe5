# mic_core/common/dates.py
from __future__ import annotations

import calendar
from datetime import date


def shift_months(d: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped (31 Mar - 1 month = 28/29 Feb)."""
    index = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(index, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(d.day, last_day))


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def start_of_year(d: date) -> date:
    return d.replace(month=1, day=1)
