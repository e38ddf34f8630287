"""Settings CLI commands for Payout Calc.

Manages settings.json - pay cycle table path and view defaults.
"""

from pathlib import Path

import click

from payoutcalc.sdk import (
    PolicyConfigError,
    get_policies_path,
    get_setting,
    get_settings_path,
    load_policy_table,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - policies: path to a custom pay cycle table (YAML)
    - upcoming_days: default window for 'upcoming'
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  policies: {get_policies_path()}")


@settings.command("policies")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom table, revert to default")
def settings_policies(path, clear):
    """Set or clear the pay cycle table used for forecasting.

    PATH is a YAML file in the same format as the bundled table. It is
    validated before being saved.

    Examples:
        payout-calc settings policies ~/payouts/pay_cycles.yaml
        payout-calc settings policies --clear
    """
    if clear:
        current = load_settings()
        if "policies" in current:
            del current["policies"]
            save_settings(current)
            click.echo("Cleared policies setting.")
            click.echo(f"Pay cycle table is now: {get_policies_path()}")
        else:
            click.echo("policies was not set.")
        return

    if not path:
        custom = get_setting("policies")
        if custom:
            click.echo(f"Current policies: {custom}")
        else:
            click.echo(f"No custom policies set. Using: {get_policies_path()}")
        return

    table_path = Path(path).expanduser().resolve()
    try:
        table = load_policy_table(table_path)
    except PolicyConfigError as e:
        raise click.ClickException(str(e))

    set_setting("policies", str(table_path))
    click.echo(f"Set policies: {table_path} ({len(table)} firms)")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("upcoming-days")
@click.argument("days", type=click.IntRange(min=1))
def settings_upcoming_days(days):
    """Set the default window for 'upcoming'."""
    set_setting("upcoming_days", days)
    click.echo(f"Set upcoming_days: {days}")
