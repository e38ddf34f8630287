"""Rich renderers for payout forecasts.

Transforms SDK models into formatted Rich tables.
"""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from payoutcalc.sdk import (
    ForecastWarning,
    MonthlyTotal,
    PayCyclePolicy,
    PayoutForecast,
    SummaryCards,
    UpcomingPayout,
    WeeklyTotal,
)


def render_warnings(console: Console, warnings: List[ForecastWarning]) -> None:
    """Render skipped claims, grouped by warning kind."""
    if not warnings:
        return

    table = Table(show_header=True, box=box.SIMPLE)
    table.add_column("Kind", style="yellow")
    table.add_column("Claim")
    table.add_column("Firm", style="dim")
    table.add_column("Reason")
    for w in sorted(warnings, key=lambda w: (w.kind, w.claim_id)):
        table.add_row(w.kind, w.claim_id, w.firm or "-", w.message)

    console.print(Panel(table, title=f"Skipped claims ({len(warnings)})", border_style="yellow"))


def render_payouts(console: Console, payouts: List[PayoutForecast], title: str = "Payout Forecast") -> None:
    """Render one row per payout bucket."""
    if not payouts:
        console.print("[dim]No payouts.[/dim]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Pay Date", min_width=15)
    table.add_column("Firm", style="bold")
    table.add_column("Work Period")
    table.add_column("Claims", justify="right")
    table.add_column("Expected", justify="right", min_width=12)

    for p in payouts:
        pay_date = _fmt_date(p)
        if isinstance(p, UpcomingPayout):
            pay_date += f" [dim](+{p.days_until}d)[/dim]"
        table.add_row(
            pay_date,
            p.firm,
            f"{p.period_start.isoformat()} - {p.period_end.isoformat()}",
            str(p.claim_count),
            _fmt(p.total_expected),
        )

    table.add_row("", "[bold]TOTAL[/bold]", "", str(sum(p.claim_count for p in payouts)),
                  f"[bold]{_fmt(sum(p.total_expected for p in payouts))}[/bold]")
    console.print(table)


def render_weekly(console: Console, weeks: List[WeeklyTotal]) -> None:
    """Render week totals with their payouts nested underneath."""
    if not weeks:
        console.print("[dim]No payouts.[/dim]")
        return

    table = Table(title="Payouts by Week", box=box.ROUNDED)
    table.add_column("Week", style="bold", min_width=25)
    table.add_column("Firm")
    table.add_column("Expected", justify="right", min_width=12)

    for week in weeks:
        table.add_row(
            f"{week.week_start.isoformat()} - {week.week_end.isoformat()}",
            "",
            f"[bold]{_fmt(week.total_amount)}[/bold]",
        )
        for p in week.payouts:
            table.add_row(f"  [dim]{_fmt_date(p)}[/dim]", p.firm, _fmt(p.total_expected))

    console.print(table)


def render_monthly(console: Console, months: List[MonthlyTotal]) -> None:
    """Render month totals with the per-firm breakdown."""
    if not months:
        console.print("[dim]No payouts.[/dim]")
        return

    table = Table(title="Payouts by Month", box=box.ROUNDED)
    table.add_column("Month", style="bold", min_width=10)
    table.add_column("Firm")
    table.add_column("Expected", justify="right", min_width=12)

    for month in months:
        table.add_row(f"{month.month_name} {month.year}", "", f"[bold]{_fmt(month.total_amount)}[/bold]")
        for firm, amount in sorted(month.by_firm.items(), key=lambda kv: -kv[1]):
            table.add_row("", firm, _fmt(amount))

    console.print(table)


def render_summary(console: Console, cards: SummaryCards) -> None:
    """Render this week / next week / this month cards."""
    table = Table(title=f"Payout Summary as of {cards.as_of.isoformat()}", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=12)
    table.add_column("Expected", justify="right", min_width=12)
    table.add_column("Payouts", justify="right")
    table.add_column("Claims", justify="right")

    for label, summary in (
        ("This week", cards.this_week),
        ("Next week", cards.next_week),
        ("This month", cards.this_month),
    ):
        table.add_row(label, _fmt(summary.total_amount), str(summary.payout_count), str(summary.claim_count))

    console.print(table)


def render_policies(console: Console, policies: List[PayCyclePolicy], version: str = "") -> None:
    """Render the pay cycle table."""
    title = f"Pay Cycles {version}".strip()
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Firm", style="bold")
    table.add_column("Cycle")
    table.add_column("Payday")
    table.add_column("Anchor")
    table.add_column("Period", justify="right")
    table.add_column("Lead", justify="right")
    table.add_column("Weekend")

    for policy in policies:
        table.add_row(
            policy.firm,
            policy.cycle_type,
            (policy.pay_weekday_name or "-").title(),
            policy.anchor_date.isoformat() if policy.anchor_date else "-",
            f"{policy.period_length_days}d" if policy.period_length_days else "calendar",
            str(policy.lead_days) if policy.lead_days is not None else "-",
            policy.weekend_shift,
        )

    console.print(table)


def _fmt_date(payout: PayoutForecast) -> str:
    return payout.payout_date.strftime("%a %Y-%m-%d")


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"
