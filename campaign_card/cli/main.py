"""CLI entry point for the Campaign Monitor contact card integration."""

import logging

import click
from dotenv import load_dotenv

from campaign_card.provider.oauth import OAuthConfig

logger = logging.getLogger(__name__)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Campaign Monitor contact card — OAuth helpers and membership lookup."""
    load_dotenv()
    logging.basicConfig(
        level=logging.WARNING,  # keep CLI output clean; errors still surface
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    ctx.obj = OAuthConfig.from_env()


# Import and register commands after cli is defined to avoid circular imports.
from campaign_card.cli.commands import (  # noqa: E402
    account,
    auth_url,
    authorize,
    lookup,
    metadata,
    refresh_token,
)

cli.add_command(auth_url)
cli.add_command(authorize)
cli.add_command(refresh_token)
cli.add_command(metadata)
cli.add_command(account)
cli.add_command(lookup)
