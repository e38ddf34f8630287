"""Payout Calc CLI - Vendor payout forecasting from a claims snapshot."""

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from payoutcalc import __version__
from payoutcalc.sdk import (
    ClaimsFileError,
    ForecastResult,
    PolicyConfigError,
    PolicyTable,
    forecast_payouts,
    get_upcoming_days,
    is_canonical_firm,
    load_claims,
    load_policy_table,
    monthly_view,
    normalize_firm_name,
    parse_date,
    resolve_period,
    summary_cards,
    upcoming_payouts,
    weekly_view,
)

from .renderers.payout_renderer import (
    render_monthly,
    render_payouts,
    render_policies,
    render_summary,
    render_warnings,
    render_weekly,
)
from .settings_commands import settings as settings_group


def _configure_logging() -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_table(policies_path: Optional[str]) -> PolicyTable:
    try:
        return load_policy_table(Path(policies_path) if policies_path else None)
    except PolicyConfigError as e:
        raise click.ClickException(str(e))


def _run_forecast(claims_file: str, policies_path: Optional[str]) -> ForecastResult:
    table = _load_table(policies_path)
    try:
        claims = load_claims(Path(claims_file), table)
    except (FileNotFoundError, ClaimsFileError) as e:
        raise click.ClickException(str(e))
    return forecast_payouts(claims, table)


def _as_of(value) -> date:
    return value.date() if value else date.today()


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


def _report_skipped(result: ForecastResult, show: bool) -> None:
    if not result.warnings:
        return
    err = Console(stderr=True)
    if show:
        render_warnings(err, result.warnings)
    else:
        err.print(f"[dim]{len(result.warnings)} claim(s) skipped; use --skipped for details.[/dim]")


def snapshot_command(f):
    """Shared CLAIMS_FILE argument and table/output options."""
    f = click.option("--skipped", is_flag=True, help="List claims left out of the forecast.")(f)
    f = click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
                     help="Output format")(f)
    f = click.option("--policies", "policies_path", type=click.Path(dir_okay=False),
                     help="Pay cycle table (YAML). Default: configured or bundled table.")(f)
    return click.argument("claims_file", type=click.Path(exists=True, dir_okay=False))(f)


@click.group()
@click.version_option(version=__version__, prog_name="payout-calc")
def cli():
    """Payout Calc - Vendor payout forecasting.

    Reads a JSON snapshot of claims exported from the claim store and
    forecasts when each firm's payouts land.

    The pay cycle table is loaded from (in order):

    \b
    1. --policies PATH
    2. settings.json 'policies' key
    3. pay_cycles.yaml in the config directory
    4. The table bundled with payout-calc
    """
    pass


cli.add_command(settings_group)


@cli.command("forecast")
@snapshot_command
def forecast_cmd(claims_file, policies_path, output_format, skipped):
    """Show every forecast payout, one row per firm and pay date."""
    result = _run_forecast(claims_file, policies_path)

    if output_format == "json":
        _echo_json(result.model_dump(mode="json"))
        return

    render_payouts(Console(), result.payouts)
    _report_skipped(result, skipped)


@cli.command("upcoming")
@snapshot_command
@click.option("--days", type=int, default=None, help="Window length (default: settings upcoming_days or 30)")
@click.option("--as-of", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Reference date (default: today)")
def upcoming_cmd(claims_file, policies_path, output_format, skipped, days, as_of):
    """Show payouts landing in the next N days."""
    result = _run_forecast(claims_file, policies_path)
    window = days if days is not None else get_upcoming_days()
    upcoming = upcoming_payouts(result.payouts, as_of=_as_of(as_of), days=window)

    if output_format == "json":
        _echo_json([p.model_dump(mode="json") for p in upcoming])
        return

    if not upcoming:
        click.echo(f"No upcoming payouts in the next {window} days")
    else:
        render_payouts(Console(), upcoming, title=f"Upcoming Payouts ({window} days)")
    _report_skipped(result, skipped)


@cli.command("weekly")
@snapshot_command
@click.option("--max-weeks", type=int, default=12, show_default=True, help="Weeks to show")
def weekly_cmd(claims_file, policies_path, output_format, skipped, max_weeks):
    """Show payouts grouped by Monday-Sunday week."""
    result = _run_forecast(claims_file, policies_path)
    weeks = weekly_view(result.payouts)[:max_weeks]

    if output_format == "json":
        _echo_json([w.model_dump(mode="json") for w in weeks])
        return

    render_weekly(Console(), weeks)
    _report_skipped(result, skipped)


@cli.command("monthly")
@snapshot_command
@click.option("--max-months", type=int, default=6, show_default=True, help="Months to show")
def monthly_cmd(claims_file, policies_path, output_format, skipped, max_months):
    """Show payouts grouped by calendar month, with per-firm totals."""
    result = _run_forecast(claims_file, policies_path)
    months = monthly_view(result.payouts)[:max_months]

    if output_format == "json":
        _echo_json([m.model_dump(mode="json") for m in months])
        return

    render_monthly(Console(), months)
    _report_skipped(result, skipped)


@cli.command("summary")
@snapshot_command
@click.option("--as-of", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Reference date (default: today)")
def summary_cmd(claims_file, policies_path, output_format, skipped, as_of):
    """Show this week / next week / this month payout totals."""
    result = _run_forecast(claims_file, policies_path)
    cards = summary_cards(result.payouts, as_of=_as_of(as_of))

    if output_format == "json":
        _echo_json(cards.model_dump(mode="json"))
        return

    render_summary(Console(), cards)
    _report_skipped(result, skipped)


@cli.command("firms")
@click.option("--policies", "policies_path", type=click.Path(dir_okay=False), help="Pay cycle table (YAML)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format")
def firms_cmd(policies_path, output_format):
    """List configured pay cycles."""
    table = _load_table(policies_path)

    if output_format == "json":
        _echo_json({
            "version": table.version,
            "source": table.source,
            "policies": [p.model_dump(mode="json") for p in table.policies],
            "unscheduled": table.unscheduled_firms,
        })
        return

    render_policies(Console(), table.policies, table.version)
    if table.unscheduled_firms:
        click.echo(f"Not forecast (no recurring schedule): {', '.join(table.unscheduled_firms)}")


@cli.command("resolve")
@click.argument("firm")
@click.argument("work_date")
@click.option("--policies", "policies_path", type=click.Path(dir_okay=False), help="Pay cycle table (YAML)")
def resolve_cmd(firm, work_date, policies_path):
    """Show the pay period and payout date for FIRM and WORK_DATE.

    FIRM may be any vendor spelling (e.g. "SL Appraisal #4471").

    Examples:
        payout-calc resolve Doan 2025-03-04
        payout-calc resolve "G T Appraisals" 2025-01-15
    """
    try:
        day = parse_date(work_date)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="WORK_DATE")
    if day is None:
        raise click.BadParameter("date required", param_hint="WORK_DATE")

    key = normalize_firm_name(firm)
    if not is_canonical_firm(key):
        raise click.ClickException(f"Firm '{firm}' not recognized")

    table = _load_table(policies_path)
    policy = table.policy_for(key)
    if policy is None:
        raise click.ClickException(f"No pay cycle configured for {key}")

    period = resolve_period(policy, day)
    click.echo(f"Firm:        {key} ({policy.cycle_type})")
    click.echo(f"Work date:   {day.strftime('%a %Y-%m-%d')}")
    click.echo(f"Period:      {period.period_start.isoformat()} - {period.period_end.isoformat()}")
    click.echo(f"Payout date: {period.payout_date.strftime('%a %Y-%m-%d')}")
    if not period.contains(day):
        click.echo(click.style("Warning: work date falls outside the resolved period", fg="yellow"))


def main():
    """Entry point for the CLI."""
    _configure_logging()
    cli()


if __name__ == "__main__":
    main()
