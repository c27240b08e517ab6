#!/usr/bin/env python3
"""
Main CLI Entry Point for Ledger Sync

Provides the ``ledger-sync`` command: run a sync, inspect the PASELI balance
and list Money Forward categories.
"""

import logging
import os
from pathlib import Path

import click
import requests

from ..core.config import get_config
from ..core.currency import format_yen
from ..core.json_utils import write_json
from ..core.models import SyncOutcome
from ..moneyforward.client import MoneyForwardClient, MoneyForwardError
from ..paseli.client import PaseliClient, PaseliError
from ..sync.engine import SyncEngine
from ..sync.errors import SyncError

# Failures that abort a run and exit with status 1
FATAL_ERRORS = (SyncError, PaseliError, MoneyForwardError, requests.RequestException, ValueError)


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Ledger Sync - mirror PASELI charges and payments into Money Forward ME.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["LEDGER_SYNC_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("ledger_sync").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    try:
        ctx.obj["config"] = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Data directory: {ctx.obj['config'].data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from ledger_sync import __author__, __version__

    click.echo(f"Ledger Sync v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_dict = ctx.obj["config"].to_dict()

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_dict['environment']}")
    click.echo(f"  Data Directory: {config_dict['data_dir']}")
    click.echo(f"  PASELI ID: {config_dict['paseli']['user_id']}")
    click.echo(f"  Money Forward Wallet: {config_dict['moneyforward']['wallet_id']}")
    click.echo(f"  Money Forward Cookies: {config_dict['moneyforward']['cookies_file']}")
    click.echo(f"  Debug Mode: {config_dict['debug']}")
    click.echo(f"  Log Level: {config_dict['log_level']}")


@main.command()
@click.option("--dry-run", is_flag=True, help="Show the entries that would be created without creating them")
@click.option("--output-file", type=click.Path(dir_okay=False, path_type=Path), help="Write a JSON sync report")
@click.pass_context
def sync(ctx: click.Context, dry_run: bool, output_file: Path | None) -> None:
    """
    Create Money Forward entries for PASELI movements missing from the wallet.

    Examples:
      ledger-sync sync --dry-run
      ledger-sync sync --output-file data/reports/latest.json
    """
    config_obj = ctx.obj["config"]

    missing = config_obj.missing_sync_settings()
    if missing:
        raise click.ClickException(f"Missing required settings: {', '.join(missing)}")

    try:
        paseli = PaseliClient.from_config()
        paseli.login()
        moneyforward = MoneyForwardClient.from_config()
        moneyforward.login()

        engine = SyncEngine(
            paseli,
            moneyforward,
            config_obj.moneyforward.wallet_id,
            dry_run=dry_run,
        )
        summary = engine.run()
    except FATAL_ERRORS as e:
        raise click.ClickException(str(e)) from e

    created_outcome = SyncOutcome.PLANNED if dry_run else SyncOutcome.CREATED
    click.echo(f"✅ Sync {'planned' if dry_run else 'complete'}: {summary.total_processed} transactions")
    click.echo(f"   Matched: {summary.count(SyncOutcome.MATCHED)}")
    click.echo(f"   {'Would create' if dry_run else 'Created'}: {summary.count(created_outcome)}")
    click.echo(f"   Skipped (old): {summary.count(SyncOutcome.SKIPPED_OLD)}")
    click.echo(f"   Unrecognized: {summary.count(SyncOutcome.UNRECOGNIZED)}")

    if ctx.obj.get("verbose"):
        for command in summary.commands:
            click.echo(
                f"   {command.date.isoformat()} {command.direction.value:<7} "
                f"{format_yen(command.amount):>10} {command.description}"
            )

    if output_file:
        write_json(output_file, summary.to_dict())
        click.echo(f"   Saved to: {output_file}")


@main.command()
def balance() -> None:
    """Show the PASELI e-money balance and points."""
    try:
        paseli = PaseliClient.from_config()
        paseli.login()
        result = paseli.current_balance()
    except FATAL_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Balance: {format_yen(result['balance'])}")
    click.echo(f"Points: {result['points']:,}")


@main.command()
@click.option(
    "--direction",
    type=click.Choice(["income", "expense"]),
    help="Only list one category scope",
)
def categories(direction: str | None) -> None:
    """List the Money Forward category catalog."""
    try:
        moneyforward = MoneyForwardClient.from_config()
        moneyforward.login()
        catalog = moneyforward.fetch_category_catalog()
    except FATAL_ERRORS as e:
        raise click.ClickException(str(e)) from e

    names = catalog.to_names()
    scopes = [direction] if direction else ["expense", "income"]
    for scope in scopes:
        click.echo(f"{scope.capitalize()} categories:")
        for large in names[scope]:
            click.echo(f"  {large['large_name']}")
            for medium_name in large["medium_names"]:
                click.echo(f"    {medium_name}")


if __name__ == "__main__":
    main()
