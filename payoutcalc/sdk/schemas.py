"""Pydantic schemas for payout forecasting.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in policy files cause clear errors rather than silent ignoring.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


CycleType = Literal[
    "weekly",
    "biweekly",
    "semi_monthly",
    "monthly_15th",
    "last_day_of_month",
]
WeekendShift = Literal["forward_to_monday", "none"]
WarningKind = Literal[
    "unknown_firm",
    "unconfigured_firm",
    "boundary_mismatch",
    "missing_amount",
    "missing_work_date",
    "duplicate_claim",
]

# date.weekday() numbering: Monday=0 ... Sunday=6
WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO-8601 date or datetime into a calendar date.

    Datetime strings keep the calendar date as written; no timezone
    conversion is applied. Empty values return None.

    Raises:
        ValueError: If the value is not a recognizable date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d").date()
        except ValueError:
            pass
        for fmt in ("%m/%d/%Y", "%m-%d-%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD.")


# =============================================================================
# Input
# =============================================================================


class Claim(BaseModel):
    """A claim snapshot handed over by the claim store.

    Immutable for the duration of a forecast run.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., description="Claim identifier")
    firm_raw: str = Field(default="", description="Vendor name as entered")
    work_date: Optional[date] = Field(
        None,
        description=(
            "Date the work is anchored to: completion date for finished work, "
            "appointment date for scheduled work"
        ),
    )
    amount_candidates: List[Optional[float]] = Field(
        default_factory=list,
        description="Amounts to try in order; first positive value wins",
    )
    status: str = Field(default="", description="Claim status (e.g. COMPLETED, SCHEDULED)")

    @field_validator("work_date", mode="before")
    @classmethod
    def coerce_work_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    @property
    def is_completed(self) -> bool:
        return self.status.strip().upper() == "COMPLETED"


# =============================================================================
# Policy table
# =============================================================================


class PayCyclePolicy(BaseModel):
    """Recurring pay calendar for one canonical firm.

    Which fields are required depends on cycle_type:
    - weekly: pay_weekday, period_length_days, lead_days
    - biweekly: the weekly fields plus anchor_date
    - semi_monthly / monthly_15th / last_day_of_month: calendar-defined
      periods, no extra fields
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    firm: str = Field(..., description="Canonical firm key")
    cycle_type: CycleType = Field(..., description="Recurring schedule type")
    pay_weekday: Optional[int] = Field(
        None, ge=0, le=6, description="Payday for weekly/biweekly (Monday=0)"
    )
    anchor_date: Optional[date] = Field(
        None, description="Known-correct historical payout date (biweekly parity)"
    )
    period_length_days: Optional[int] = Field(
        None, ge=1, description="Days covered by one pay period"
    )
    lead_days: Optional[int] = Field(
        None, ge=0, description="Days between period end and payout date"
    )
    weekend_shift: WeekendShift = Field(
        default="none", description="How a weekend payout date is moved"
    )
    notes: Optional[str] = Field(None, description="Where the schedule came from")

    @field_validator("pay_weekday", mode="before")
    @classmethod
    def weekday_from_name(cls, v: Any) -> Any:
        """Accept weekday names ('wednesday', 'Wed') as well as integers."""
        if isinstance(v, str) and not v.strip().isdigit():
            name = v.strip().lower()
            for idx, full in enumerate(WEEKDAY_NAMES):
                if len(name) >= 3 and full.startswith(name):
                    return idx
            raise ValueError(f"Unknown weekday '{v}'")
        return v

    @model_validator(mode="after")
    def check_required_fields(self) -> "PayCyclePolicy":
        """Reject policies missing a field their cycle type needs."""
        errors = []

        if self.cycle_type in ("weekly", "biweekly"):
            for field_name in ("pay_weekday", "period_length_days", "lead_days"):
                if getattr(self, field_name) is None:
                    errors.append(f"{self.cycle_type} policy requires '{field_name}'")

        if self.cycle_type == "biweekly":
            if self.anchor_date is None:
                errors.append("biweekly policy requires 'anchor_date'")
            elif self.pay_weekday is not None and self.anchor_date.weekday() != self.pay_weekday:
                errors.append(
                    f"anchor_date {self.anchor_date.isoformat()} is a "
                    f"{WEEKDAY_NAMES[self.anchor_date.weekday()]}, "
                    f"expected {WEEKDAY_NAMES[self.pay_weekday]}"
                )

        if errors:
            raise ValueError("; ".join(errors))

        return self

    @property
    def pay_weekday_name(self) -> Optional[str]:
        if self.pay_weekday is None:
            return None
        return WEEKDAY_NAMES[self.pay_weekday]


class FirmFee(BaseModel):
    """Standard fee for a firm, used to estimate scheduled work."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_fee: float = Field(..., ge=0, description="Flat fee per appraisal")
    per_mile_rate: Optional[float] = Field(None, ge=0, description="Mileage reimbursement rate")
    notes: Optional[str] = Field(None, description="Payment notes")


# =============================================================================
# Resolver and aggregator output
# =============================================================================


class PayoutPeriod(BaseModel):
    """Work period covered by one payout, and when the money lands."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    period_start: date
    period_end: date
    payout_date: date

    def contains(self, day: date) -> bool:
        return self.period_start <= day <= self.period_end


class PayoutForecast(BaseModel):
    """One payout bucket: every claim a firm pays together on one date."""

    model_config = ConfigDict(extra="forbid")

    firm: str = Field(..., description="Canonical firm key")
    payout_date: date = Field(..., description="Expected deposit date")
    period_start: date = Field(..., description="First day of covered work")
    period_end: date = Field(..., description="Last day of covered work")
    total_expected: float = Field(..., ge=0, description="Sum of member claim amounts")
    claim_count: int = Field(..., ge=0, description="Number of member claims")
    claim_ids: List[str] = Field(default_factory=list, description="Member claim ids")

    @model_validator(mode="after")
    def check_coherence(self) -> "PayoutForecast":
        if self.claim_count != len(self.claim_ids):
            raise ValueError(
                f"claim_count ({self.claim_count}) != len(claim_ids) ({len(self.claim_ids)})"
            )
        if self.period_start > self.period_end:
            raise ValueError(
                f"period_start ({self.period_start}) after period_end ({self.period_end})"
            )
        return self


class ForecastWarning(BaseModel):
    """A claim left out of the forecast, and why."""

    model_config = ConfigDict(extra="forbid")

    kind: WarningKind
    claim_id: str
    firm: Optional[str] = None
    message: str


class ForecastResult(BaseModel):
    """Output of forecast_payouts."""

    model_config = ConfigDict(extra="forbid")

    payouts: List[PayoutForecast] = Field(default_factory=list)
    warnings: List[ForecastWarning] = Field(default_factory=list)
    claims_considered: int = 0
    claims_included: int = 0

    def warnings_of(self, kind: WarningKind) -> List[ForecastWarning]:
        return [w for w in self.warnings if w.kind == kind]


# =============================================================================
# Views
# =============================================================================


class UpcomingPayout(PayoutForecast):
    """A payout landing inside the upcoming window."""

    days_until: int = Field(..., ge=0, description="Days from as-of date to payout")


class WeeklyTotal(BaseModel):
    """Payouts landing in one Monday-Sunday week."""

    model_config = ConfigDict(extra="forbid")

    week_start: date
    week_end: date
    total_amount: float
    payouts: List[PayoutForecast] = Field(default_factory=list)


class MonthlyTotal(BaseModel):
    """Payouts landing in one calendar month, with a per-firm breakdown."""

    model_config = ConfigDict(extra="forbid")

    year: int
    month: int = Field(..., ge=1, le=12)
    month_name: str
    total_amount: float
    by_firm: Dict[str, float] = Field(default_factory=dict)


class PayoutSummary(BaseModel):
    """Totals over a set of payouts."""

    model_config = ConfigDict(extra="forbid")

    total_amount: float = 0.0
    payout_count: int = 0
    claim_count: int = 0


class SummaryCards(BaseModel):
    """Dashboard cards: this week, next week and this month."""

    model_config = ConfigDict(extra="forbid")

    as_of: date
    this_week: PayoutSummary
    next_week: PayoutSummary
    this_month: PayoutSummary
