"""Pay period resolution.

Given a firm's PayCyclePolicy and the date work was done (or is scheduled),
find the pay period that covers it and the date the payout lands.

Every cycle type follows the same three steps:
1. Find the payout candidate: the next payday after the work date
   (strictly after for weekday cycles, so payday work rolls forward).
2. Derive the period boundaries from the candidate.
3. Apply the weekend shift to the payout date only. Period boundaries
   are never shifted.

Weekly and biweekly periods are derived from lead_days and
period_length_days. Calendar cycles (semi-monthly, monthly, month-end)
use calendar boundaries.

Biweekly parity: the weekly search finds the next payday weekday, which
is right for only every other week. The anchor_date is a deposit known
to have landed on the cycle; if an odd number of whole weeks separates
the candidate from the anchor, the candidate is on the off week and
moves forward 7 days.
"""

import calendar
from datetime import date, timedelta

from .schemas import PayCyclePolicy, PayoutPeriod


def next_weekday_after(day: date, weekday: int) -> date:
    """Next date with the given weekday strictly after day (Monday=0).

    A date that already falls on the weekday advances a full week.
    """
    days_ahead = (weekday - day.weekday()) % 7 or 7
    return day + timedelta(days=days_ahead)


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def add_months(day: date, months: int) -> date:
    """Same day-of-month, `months` later, clamped to the month's last day."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def apply_weekend_shift(payout: date, direction: str) -> date:
    """Move a weekend payout date per the policy's shift direction.

    forward_to_monday: Saturday +2, Sunday +1. Payout dates only; this is
    not the observed-holiday rule used for calendar display.
    """
    if direction == "forward_to_monday":
        if payout.weekday() == 5:
            return payout + timedelta(days=2)
        if payout.weekday() == 6:
            return payout + timedelta(days=1)
    return payout


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def biweekly_parity_offset(candidate: date, anchor: date) -> int:
    """Days to add to a weekly candidate to land on the anchor's cycle (0 or 7)."""
    weeks_since_anchor = (candidate - anchor).days // 7
    return 7 if weeks_since_anchor % 2 != 0 else 0


def _weekday_cycle(policy: PayCyclePolicy, work_date: date) -> PayoutPeriod:
    candidate = next_weekday_after(work_date, policy.pay_weekday)
    if policy.cycle_type == "biweekly":
        candidate += timedelta(days=biweekly_parity_offset(candidate, policy.anchor_date))

    period_end = candidate - timedelta(days=policy.lead_days)
    period_start = period_end - timedelta(days=policy.period_length_days - 1)
    return PayoutPeriod(
        period_start=period_start,
        period_end=period_end,
        payout_date=apply_weekend_shift(candidate, policy.weekend_shift),
    )


def _semi_monthly(policy: PayCyclePolicy, work_date: date) -> PayoutPeriod:
    if work_date.day <= 15:
        start = work_date.replace(day=1)
        end = work_date.replace(day=15)
    else:
        start = work_date.replace(day=16)
        end = last_day_of_month(work_date.year, work_date.month)
    return PayoutPeriod(
        period_start=start,
        period_end=end,
        payout_date=apply_weekend_shift(end, policy.weekend_shift),
    )


def _monthly_15th(policy: PayCyclePolicy, work_date: date) -> PayoutPeriod:
    # The month's work is paid on the 15th of the following month.
    start = work_date.replace(day=1)
    end = last_day_of_month(work_date.year, work_date.month)
    candidate = add_months(start, 1).replace(day=15)
    return PayoutPeriod(
        period_start=start,
        period_end=end,
        payout_date=apply_weekend_shift(candidate, policy.weekend_shift),
    )


def _last_day_of_month(policy: PayCyclePolicy, work_date: date) -> PayoutPeriod:
    start = work_date.replace(day=1)
    end = last_day_of_month(work_date.year, work_date.month)
    return PayoutPeriod(
        period_start=start,
        period_end=end,
        payout_date=apply_weekend_shift(end, policy.weekend_shift),
    )


_RESOLVERS = {
    "weekly": _weekday_cycle,
    "biweekly": _weekday_cycle,
    "semi_monthly": _semi_monthly,
    "monthly_15th": _monthly_15th,
    "last_day_of_month": _last_day_of_month,
}


def resolve_period(policy: PayCyclePolicy, work_date: date) -> PayoutPeriod:
    """Resolve the pay period covering work_date and its payout date.

    Args:
        policy: Validated pay cycle policy
        work_date: Completion date (finished work) or appointment date
                   (scheduled work)

    Returns:
        PayoutPeriod with period_start, period_end and payout_date. The
        caller is responsible for checking period.contains(work_date).
    """
    return _RESOLVERS[policy.cycle_type](policy, work_date)
