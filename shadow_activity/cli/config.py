"""
CLI config commands — configuration checking.

Usage:
    shadow-activity check-config [--config FILE]
"""

from __future__ import annotations

import click

from .mirror import config_option


@click.command("check-config")
@config_option
@click.pass_context
def check_config(ctx: click.Context, config_path) -> None:
    """Validate the config file and show the resolved values."""
    from ..config.loader import load_settings, resolve_config_path
    from ..errors import ConfigInvalid

    path = resolve_config_path(config_path)
    click.echo(f"\n📋 Config: {path}\n")

    try:
        settings = load_settings(config_path)
    except ConfigInvalid as e:
        click.secho(f"  ✗ {e.message}", fg="red")
        if e.fields:
            click.echo()
            click.echo(f"  Fields to fix: {', '.join(e.fields)}")
        ctx.exit(1)

    for key, value in settings.to_display_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        click.secho(f"  ✓ {key}", fg="green", nl=False)
        click.echo(f" — {value}")

    click.echo()
    click.secho("Configuration is valid.", bold=True)
