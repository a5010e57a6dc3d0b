"""Typer command line interface for verifying license tokens."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from . import __version__
from .claims import Claims
from .config import VerifierSettings
from .fingerprint import system_fingerprint
from .limits import LicenseLimits
from .service import LicenseService
from .validator import VerificationContext
from .verifier import LicenseVerifier, VerificationOutcome

API_HOST = "127.0.0.1"
API_PORT = 4820

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Offline license token verifier")
console = Console()


def _read_token(value: str) -> str:
    try:
        is_file = Path(value).expanduser().is_file()
    except OSError:
        # ENAMETOOLONG for real tokens on most filesystems.
        is_file = False
    if is_file:
        return Path(value).expanduser().read_text(encoding="utf-8").strip()
    return value.strip()


def _parse_now(value: Optional[str]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Not an ISO 8601 date-time: {value}", param_hint="--now") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _claims_table(claims: Claims, title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    table.add_column("Claim", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Customer", claims.customer_name)
    table.add_row("Type", claims.license_type)
    table.add_row("Max product lines", str(claims.max_product_lines))
    table.add_row("Max users", "-" if claims.max_users is None else str(claims.max_users))
    table.add_row("Expires", claims.expires_at)
    table.add_row("Machine", claims.machine_id or "(unbound)")
    return table


def _print_outcome(outcome: VerificationOutcome) -> None:
    if outcome.valid and outcome.claims is not None:
        console.print(_claims_table(outcome.claims, "Valid license"))
        return
    error = outcome.error.value if outcome.error else "unknown"
    console.print(f"[bold red]Invalid license[/]: {error} - {outcome.message}")
    for key, value in sorted(outcome.details.items()):
        console.print(f"  {key}: {value}")
    if outcome.claims is not None:
        console.print(_claims_table(outcome.claims, "Signed claims"))


def _print_limits(limits: LicenseLimits) -> None:
    table = Table(title="Effective limits", box=box.ROUNDED, show_lines=True)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Customer", limits.customer_name)
    table.add_row("Type", limits.license_type)
    table.add_row("Max product lines", str(limits.max_product_lines))
    table.add_row("Max users", str(limits.max_users))
    table.add_row("Expires", limits.expires_at or "-")
    table.add_row("Valid", "yes" if limits.is_valid else "no")
    console.print(table)
    if limits.warning:
        console.print(f"[yellow]{limits.warning}[/]")


@app.command()
def verify(
    token: str = typer.Argument(..., help="Compact token, or a file containing it."),
    public_key: Optional[Path] = typer.Option(
        None, "--public-key", "-k", exists=True, dir_okay=False, help="PEM or DER public key (default: embedded key)."
    ),
    now: Optional[str] = typer.Option(None, help="Verification instant, ISO 8601 (default: current UTC time)."),
    fingerprint: Optional[str] = typer.Option(None, help="System fingerprint 'machine|...' for bound licenses."),
    this_machine: bool = typer.Option(False, "--this-machine", help="Use this machine's fingerprint."),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON."),
) -> None:
    """Verify a license token and show its claims."""
    if fingerprint and this_machine:
        raise typer.BadParameter("Use either --fingerprint or --this-machine", param_hint="--fingerprint")

    if public_key is not None:
        verifier = LicenseVerifier(public_key.read_bytes())
    else:
        verifier = LicenseVerifier.embedded(VerifierSettings.from_env())

    context = VerificationContext(
        current_time=_parse_now(now),
        system_fingerprint=system_fingerprint() if this_machine else fingerprint,
    )
    outcome = verifier.verify(_read_token(token), context)

    if as_json:
        typer.echo(json.dumps(outcome.as_dict(), ensure_ascii=False, indent=2))
    else:
        _print_outcome(outcome)
    if not outcome.valid:
        raise typer.Exit(code=1)


@app.command("fingerprint")
def show_fingerprint() -> None:
    """Print this machine's fingerprint."""
    typer.echo(system_fingerprint())


@app.command()
def status(as_json: bool = typer.Option(False, "--json", help="Print the limits as JSON.")) -> None:
    """Verify the configured LICENSE_KEY and show the effective limits."""
    limits = LicenseService().limits()
    if as_json:
        typer.echo(json.dumps(limits.as_dict(), ensure_ascii=False, indent=2))
    else:
        _print_limits(limits)


@app.command("api")
def run_api(
    host: str = typer.Option(API_HOST, help="Listen address"),
    port: int = typer.Option(API_PORT, help="HTTP port"),
) -> None:
    """Serve the license status endpoint."""
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


@app.command()
def version() -> None:
    """Print the package version."""
    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
