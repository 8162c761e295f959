"""Flask CLI commands for credential housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from sessionauth.services.wiring import get_services

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Maintenance commands for refresh tokens and the access token blocklist."""


@tokens_cli.command("purge-blocklist")
@with_appcontext
def purge_blocklist() -> None:
    """Delete blocklist entries whose access token has already expired.

    Lookups ignore expired entries anyway; this only reclaims storage.
    """
    removed = get_services().tokens.blocklist.purge_expired()
    LOGGER.info("Blocklist purge finished", extra={"count": removed})
    click.echo(f"Removed {removed} expired blocklist entries.")


@tokens_cli.command("revoke-subject")
@click.argument("subject_id")
@with_appcontext
def revoke_subject(subject_id: str) -> None:
    """Revoke every refresh token issued to SUBJECT_ID."""
    count = get_services().tokens.revoke_all_for_subject(subject_id)
    click.echo(f"Revoked {count} refresh token(s) for {subject_id}.")
