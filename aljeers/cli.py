"""Click CLI for building envelopes and checking access logs."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from aljeers.audit.logger import validate_access_chain
from aljeers.errors import SerializationError
from aljeers.models import ResponseStructure


@click.group()
def cli() -> None:
    """aljeers JSON envelope tools."""


@cli.command()
@click.argument("value")
@click.option("--indent", default=None, type=int, help="Indent the printed JSON.")
def envelope(value: str, indent: int | None) -> None:
    """Print VALUE wrapped as {"body": VALUE}.

    VALUE is parsed as JSON; anything that does not parse is used as a string.
    """
    try:
        result: object = json.loads(value)
    except json.JSONDecodeError:
        result = value
    try:
        payload = ResponseStructure(body=result).to_payload()
    except SerializationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(json.dumps(payload, indent=indent))


@cli.command("verify-log")
@click.argument("log_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def verify_log(log_path: Path) -> None:
    """Validate the hash chain of an access log."""
    result = validate_access_chain(log_path)
    if result.valid:
        click.echo(f"Chain intact: {log_path}")
        return
    click.echo(f"Chain broken at line {result.broken_at_line}: {log_path}", err=True)
    sys.exit(1)
