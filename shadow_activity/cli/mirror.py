"""
CLI mirror commands — run the mirror and inspect its progress.

Usage:
    shadow-activity run [--config FILE] [--dry-run] [--debug] [--json]
    shadow-activity status [--config FILE] [--json]
"""

from __future__ import annotations

import json as json_lib
import logging

import click

from ..config.loader import load_settings
from ..errors import ConfigInvalid, ShadowActivityError
from ..logging_config import setup_logging

logger = logging.getLogger(__name__)

config_option = click.option(
    "--config",
    "config_path",
    envvar="SHADOW_CONFIG",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: $SHADOW_CONFIG or ./config.json)",
)


def _load_or_exit(ctx: click.Context, config_path):
    try:
        return load_settings(config_path)
    except ConfigInvalid as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)


@click.command("run")
@config_option
@click.option("--dry-run", is_flag=True, help="Preview shadow commits without writing anything")
@click.option("--debug", is_flag=True, help="Verbose logging, including the loaded config")
@click.option("--json", "as_json", is_flag=True, help="Print the run report as JSON")
@click.pass_context
def run(ctx: click.Context, config_path, dry_run: bool, debug: bool, as_json: bool) -> None:
    """Mirror source commit activity into the target repository."""
    from ..mirror.engine import run_mirror

    if debug:
        setup_logging(level="DEBUG")

    settings = _load_or_exit(ctx, config_path)

    if debug:
        for key, value in settings.to_display_dict().items():
            if isinstance(value, list):
                value = ", ".join(value)
            logger.debug(f"Config {key}: {value}")

    if not as_json:
        click.echo("Starting shadow-git-activity...")
        click.echo()

    try:
        report = run_mirror(settings, dry_run=dry_run)
    except ShadowActivityError as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json_lib.dumps(report.to_dict(), indent=2))
        if not report.ok:
            ctx.exit(1)
        return

    if not report.ok:
        click.secho(f"⚠ {report.message}", fg="yellow", err=True)
        ctx.exit(1)

    prefix = "[dry-run] " if dry_run else ""
    for message in report.emitted:
        click.echo(f"  {prefix}{message}")
    if report.emitted:
        click.echo()

    click.echo(f"{report.examined} source commits processed.")
    if report.skipped_ledger:
        click.echo(f"{report.skipped_ledger} already shadowed.")
    if report.skipped_zero_diff:
        click.echo(f"{report.skipped_zero_diff} without line changes.")

    if dry_run:
        click.secho(f"{prefix}{report.mirrored} new shadow commits would be created.", fg="cyan")
    else:
        click.secho(f"✓ {report.mirrored} new shadow commits created.", fg="green")


@click.command("status")
@config_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx: click.Context, config_path, as_json: bool) -> None:
    """Show how far the target lags behind the source."""
    from ..mirror.engine import inspect_mirror, open_repository

    settings = _load_or_exit(ctx, config_path)

    try:
        source = open_repository(settings.repo_path_source, "source")
        target = open_repository(settings.repo_path_target, "target")
        result = inspect_mirror(source, target, settings)
    except ShadowActivityError as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json_lib.dumps(result, indent=2))
        return

    click.echo("\n🔀 Shadow Status\n")
    click.echo(f"  Source:     {result['source']} ({result['branch']})")
    click.echo(f"  Target:     {result['target']}")
    click.echo(f"  Artifact:   {result['artifact']} ({result['artifact_lines']} lines)")
    click.echo()
    click.echo(f"  Source commits:     {result['source_commits']}")
    click.echo(f"  Matching authors:   {result['filtered_commits']}")
    click.echo(f"  Already shadowed:   {result['ledger_size']}")

    pending = result["pending_commits"]
    if pending:
        click.secho(f"  Pending:            {pending}", fg="yellow")
    else:
        click.secho("  Pending:            0 (up to date)", fg="green")

    if result["status"] != "ok":
        click.secho(f"  ⚠ {result['status']}", fg="yellow")
    click.echo()
