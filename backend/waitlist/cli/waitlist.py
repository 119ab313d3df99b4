"""Flask CLI commands for operating the waitlist."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from waitlist.infra import get_collaborators
from waitlist.infra.jwt import issue_admin_token
from waitlist.models import CodePool
from waitlist.seeds.codes import load_pools
from waitlist.services import CertificateSweepService, CodeSeedService

LOGGER = logging.getLogger(__name__)


def seed_code_pools() -> dict[CodePool, int]:
    """Seed both code pools from configuration. Requires an app context.

    :returns: Inserted codes per pool (``0`` for pools that were populated).
    """
    config = current_app.config
    standard, late = load_pools(
        config.get("REGISTRATION_CODES_FILE"),
        config.get("LATE_REGISTRATION_CODES_FILE"),
    )
    return CodeSeedService().seed(standard=standard, late=late)


@click.group("waitlist")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def waitlist_cli(verbose: bool) -> None:
    """Waitlist operations: code seeding, certificate sweep, admin tokens."""
    if verbose:
        logging.getLogger("waitlist").setLevel(logging.DEBUG)


@waitlist_cli.command("seed-codes")
@with_appcontext
def seed_codes_command() -> None:
    """Load registration codes into empty pools (safe to run repeatedly)."""
    inserted = seed_code_pools()
    remaining = CodeSeedService().remaining()
    click.echo("Code pools:")
    for pool in CodePool:
        click.echo(
            f"  {pool.value.ljust(8)}  inserted={inserted[pool]:>4}  available={remaining[pool]:>4}"
        )


@waitlist_cli.command("send-certificates")
@with_appcontext
def send_certificates_command() -> None:
    """Email a certificate to every registrant (best effort)."""
    deps = get_collaborators(current_app)
    summary = CertificateSweepService(
        renderer=deps.renderer,
        notifier=deps.notifier,
        settings=deps.settings,
        clock=deps.clock,
    ).send_certificates()
    click.echo(f"total={summary.total} sent={summary.sent} failed={summary.failed}")
    for email in summary.failures:
        click.echo(f"  failed: {email}")
    if summary.failed:
        raise click.ClickException(f"{summary.failed} certificate(s) could not be sent.")


@waitlist_cli.command("issue-admin-token")
@click.option("--identity", default="admin", show_default=True, help="Token subject.")
@click.option("--hours", default=12.0, show_default=True, type=float, help="Lifetime.")
@with_appcontext
def issue_admin_token_command(identity: str, hours: float) -> None:
    """Print a bearer token for the admin endpoints."""
    try:
        token = issue_admin_token(identity, hours=hours)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--hours") from exc
    click.echo(token)
