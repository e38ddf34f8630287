"""Payout Calc SDK - Pay cycle rules and payout forecasting."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_policies_path,
    get_upcoming_days,
)

from .schemas import (
    Claim,
    PayCyclePolicy,
    FirmFee,
    PayoutPeriod,
    PayoutForecast,
    ForecastWarning,
    ForecastResult,
    UpcomingPayout,
    WeeklyTotal,
    MonthlyTotal,
    PayoutSummary,
    SummaryCards,
    parse_date,
)

from .firms import (
    CANONICAL_FIRMS,
    UNKNOWN_FIRM,
    normalize_firm_name,
    is_canonical_firm,
    display_firm_name,
)

from .policies import (
    PolicyTable,
    PolicyConfigError,
    load_policy_table,
    get_default_table,
)

from .periods import (
    resolve_period,
    next_weekday_after,
    last_day_of_month,
    apply_weekend_shift,
    week_start,
)

from .forecast import (
    forecast_payouts,
    aggregate,
    resolve_amount,
)

from .views import (
    upcoming_payouts,
    weekly_view,
    monthly_view,
    summarize,
    summary_cards,
)

from .claims import (
    ClaimsFileError,
    claim_from_record,
    claims_from_records,
    load_claims,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_policies_path",
    "get_upcoming_days",
    # Schemas
    "Claim",
    "PayCyclePolicy",
    "FirmFee",
    "PayoutPeriod",
    "PayoutForecast",
    "ForecastWarning",
    "ForecastResult",
    "UpcomingPayout",
    "WeeklyTotal",
    "MonthlyTotal",
    "PayoutSummary",
    "SummaryCards",
    "parse_date",
    # Firm names
    "CANONICAL_FIRMS",
    "UNKNOWN_FIRM",
    "normalize_firm_name",
    "is_canonical_firm",
    "display_firm_name",
    # Policy table
    "PolicyTable",
    "PolicyConfigError",
    "load_policy_table",
    "get_default_table",
    # Period resolution
    "resolve_period",
    "next_weekday_after",
    "last_day_of_month",
    "apply_weekend_shift",
    "week_start",
    # Forecasting
    "forecast_payouts",
    "aggregate",
    "resolve_amount",
    # Views
    "upcoming_payouts",
    "weekly_view",
    "monthly_view",
    "summarize",
    "summary_cards",
    # Claims snapshot
    "ClaimsFileError",
    "claim_from_record",
    "claims_from_records",
    "load_claims",
]
