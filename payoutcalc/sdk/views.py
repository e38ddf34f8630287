"""Calendar views over payout buckets.

Every view is re-derived from the bucket list and filters on payout_date
only, never on work dates: a payout "this month" may cover work from an
earlier period.
"""

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .periods import week_start
from .schemas import (
    MonthlyTotal,
    PayoutForecast,
    PayoutSummary,
    SummaryCards,
    UpcomingPayout,
    WeeklyTotal,
)


def _by_payout_date(payouts: Iterable[PayoutForecast]) -> List[PayoutForecast]:
    return sorted(payouts, key=lambda p: (p.payout_date, p.firm))


def payouts_in_range(payouts: Iterable[PayoutForecast], start: date, end: date) -> List[PayoutForecast]:
    """Payouts with start <= payout_date <= end, ascending."""
    return _by_payout_date(p for p in payouts if start <= p.payout_date <= end)


def upcoming_payouts(
    payouts: Iterable[PayoutForecast],
    as_of: Optional[date] = None,
    days: int = 30,
) -> List[UpcomingPayout]:
    """Payouts landing within `days` of as_of (inclusive on both ends).

    Args:
        payouts: Payout buckets
        as_of: Reference date. Defaults to today.
        days: Window length in days
    """
    if as_of is None:
        as_of = date.today()
    window_end = as_of + timedelta(days=days)

    return [
        UpcomingPayout(**p.model_dump(), days_until=(p.payout_date - as_of).days)
        for p in payouts_in_range(payouts, as_of, window_end)
    ]


def weekly_view(payouts: Iterable[PayoutForecast]) -> List[WeeklyTotal]:
    """Group payouts by the Monday-Sunday week containing payout_date."""
    weeks: Dict[date, List[PayoutForecast]] = defaultdict(list)
    for payout in _by_payout_date(payouts):
        weeks[week_start(payout.payout_date)].append(payout)

    return [
        WeeklyTotal(
            week_start=start,
            week_end=start + timedelta(days=6),
            total_amount=round(sum(p.total_expected for p in members), 2),
            payouts=members,
        )
        for start, members in sorted(weeks.items())
    ]


def monthly_view(payouts: Iterable[PayoutForecast]) -> List[MonthlyTotal]:
    """Group payouts by calendar month of payout_date, with per-firm totals."""
    months: Dict[Tuple[int, int], Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for payout in payouts:
        key = (payout.payout_date.year, payout.payout_date.month)
        months[key][payout.firm] += payout.total_expected

    result = []
    for (year, month), firm_totals in sorted(months.items()):
        by_firm = {firm: round(total, 2) for firm, total in sorted(firm_totals.items())}
        result.append(MonthlyTotal(
            year=year,
            month=month,
            month_name=calendar.month_abbr[month],
            total_amount=round(sum(by_firm.values()), 2),
            by_firm=by_firm,
        ))
    return result


def summarize(payouts: Iterable[PayoutForecast]) -> PayoutSummary:
    """Total amount, payout count and claim count."""
    payouts = list(payouts)
    return PayoutSummary(
        total_amount=round(sum(p.total_expected for p in payouts), 2),
        payout_count=len(payouts),
        claim_count=sum(p.claim_count for p in payouts),
    )


def summary_cards(payouts: Iterable[PayoutForecast], as_of: Optional[date] = None) -> SummaryCards:
    """This week / next week / this month dashboard totals.

    "This week" is as_of through as_of + 7 days and "next week" is
    as_of + 7 through as_of + 14, so a payout exactly 7 days out counts
    in both. "This month" is the calendar month of as_of.
    """
    if as_of is None:
        as_of = date.today()
    payouts = list(payouts)

    this_month = [
        p for p in payouts
        if (p.payout_date.year, p.payout_date.month) == (as_of.year, as_of.month)
    ]

    return SummaryCards(
        as_of=as_of,
        this_week=summarize(payouts_in_range(payouts, as_of, as_of + timedelta(days=7))),
        next_week=summarize(
            payouts_in_range(payouts, as_of + timedelta(days=7), as_of + timedelta(days=14))
        ),
        this_month=summarize(this_month),
    )
