"""
Shadow Git Activity — CLI Entry Point

Usage:
    shadow-activity run [--dry-run] [--debug] [--json]
    shadow-activity status [--json]
    shadow-activity check-config
"""

from __future__ import annotations

# Load .env FIRST, before anything reads SHADOW_* or LOG_* variables
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import click

from .cli.config import check_config
from .cli.mirror import run, status
from .logging_config import setup_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Shadow Git Activity — mirror commit cadence, not code."""
    ctx.ensure_object(dict)
    setup_logging()


cli.add_command(run)
cli.add_command(status)
cli.add_command(check_config)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
