"""Payout forecasting.

Buckets claims by (firm, payout date). Each claim goes through:

    normalize firm -> look up policy -> resolve amount -> resolve period
    -> check the period contains the work date -> add to bucket

A claim that fails any step is left out and reported as a ForecastWarning;
no single claim can abort the run. Output is a pure function of the input
snapshot: the same claims always produce the same buckets in the same order.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .firms import is_canonical_firm, normalize_firm_name
from .periods import resolve_period
from .policies import PolicyTable, get_default_table
from .schemas import Claim, ForecastResult, ForecastWarning, PayoutForecast

logger = logging.getLogger(__name__)


def resolve_amount(candidates: Sequence[Optional[float]]) -> Optional[float]:
    """First usable amount in the fallback chain.

    None, zero and negative entries are skipped. Returns None if nothing
    usable is found; the caller must not treat that as zero.
    """
    for amount in candidates:
        if amount is not None and amount > 0:
            return float(amount)
    return None


class _Bucket:
    """Mutable accumulator for one (firm, payout_date) key during a run."""

    def __init__(self, firm: str, payout_date: date, period_start: date, period_end: date):
        self.firm = firm
        self.payout_date = payout_date
        self.period_start = period_start
        self.period_end = period_end
        self.total = 0.0
        self.claim_ids: List[str] = []

    def add(self, claim_id: str, amount: float) -> None:
        self.total += amount
        self.claim_ids.append(claim_id)

    def to_forecast(self) -> PayoutForecast:
        return PayoutForecast(
            firm=self.firm,
            payout_date=self.payout_date,
            period_start=self.period_start,
            period_end=self.period_end,
            total_expected=round(self.total, 2),
            claim_count=len(self.claim_ids),
            claim_ids=list(self.claim_ids),
        )


def forecast_payouts(
    claims: Iterable[Claim],
    table: Optional[PolicyTable] = None,
) -> ForecastResult:
    """Bucket claims into expected payouts.

    Args:
        claims: Claim snapshot
        table: Pay cycle table. Defaults to the bundled table.

    Returns:
        ForecastResult with payouts sorted by (payout_date, firm) and one
        warning per excluded claim
    """
    if table is None:
        table = get_default_table()

    buckets: Dict[Tuple[str, date], _Bucket] = {}
    warnings: List[ForecastWarning] = []
    seen_ids = set()
    considered = 0
    included = 0

    def skip(kind: str, claim: Claim, firm: Optional[str], message: str) -> None:
        logger.warning(f"claim {claim.id}: {message}")
        warnings.append(ForecastWarning(kind=kind, claim_id=claim.id, firm=firm, message=message))

    for claim in claims:
        considered += 1

        if claim.id in seen_ids:
            skip("duplicate_claim", claim, None, "duplicate claim id in snapshot, counted once")
            continue
        seen_ids.add(claim.id)

        firm = normalize_firm_name(claim.firm_raw)
        if not is_canonical_firm(firm):
            skip("unknown_firm", claim, None, f"firm '{claim.firm_raw}' not recognized")
            continue

        policy = table.policy_for(firm)
        if policy is None:
            skip("unconfigured_firm", claim, firm, f"no pay cycle configured for {firm}")
            continue

        if claim.work_date is None:
            skip("missing_work_date", claim, firm, "no completion or appointment date")
            continue

        amount = resolve_amount(claim.amount_candidates)
        if amount is None:
            skip("missing_amount", claim, firm, "no usable amount in fallback chain")
            continue

        period = resolve_period(policy, claim.work_date)
        if not period.contains(claim.work_date):
            skip(
                "boundary_mismatch",
                claim,
                firm,
                f"work date {claim.work_date.isoformat()} outside resolved period "
                f"{period.period_start.isoformat()}..{period.period_end.isoformat()} "
                f"(payout {period.payout_date.isoformat()})",
            )
            continue

        key = (firm, period.payout_date)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = _Bucket(firm, period.payout_date, period.period_start, period.period_end)
            buckets[key] = bucket
        bucket.add(claim.id, amount)
        included += 1

    payouts = [buckets[key].to_forecast() for key in sorted(buckets, key=lambda k: (k[1], k[0]))]

    logger.debug(
        f"forecast: {considered} claims, {included} included, "
        f"{len(warnings)} skipped, {len(payouts)} payouts"
    )

    return ForecastResult(
        payouts=payouts,
        warnings=warnings,
        claims_considered=considered,
        claims_included=included,
    )


def aggregate(claims: Iterable[Claim], table: Optional[PolicyTable] = None) -> List[PayoutForecast]:
    """Payout buckets only; see forecast_payouts for warnings."""
    return forecast_payouts(claims, table).payouts
