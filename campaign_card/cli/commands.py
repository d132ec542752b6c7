"""CLI command implementations — OAuth helpers and card lookup."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import NoReturn

import click
import httpx
from rich.console import Console
from rich.panel import Panel

from campaign_card.processing.summarizer import SummaryConfig
from campaign_card.processing.types import Summary
from campaign_card.provider import oauth
from campaign_card.provider.client import campaign_monitor_client
from campaign_card.provider.errors import ProviderError
from campaign_card.provider.oauth import OAuthConfig
from campaign_card.provider.types import METADATA, Account, OAuthToken

logger = logging.getLogger(__name__)
console = Console(width=200)


def _fail(exc: ProviderError) -> NoReturn:
    """Print a provider error and exit non-zero."""
    console.print(f"[red]Campaign Monitor error: {exc.message}[/red]")
    if exc.status:
        console.print(f"[dim]HTTP {exc.status} {exc.status_text or ''}[/dim]")
    if exc.cause:
        console.print(f"[dim]{exc.cause.error}: {exc.cause.error_description}[/dim]")
    raise SystemExit(1)


def _print_token(token: OAuthToken) -> None:
    console.print(f"access_token:  {token.access_token}")
    console.print(f"refresh_token: {token.refresh_token}")
    console.print(f"expires_on:    {token.expires_on.isoformat()}")


def _bearer(access_token: str) -> OAuthToken:
    # Lookups only need the access token.
    return OAuthToken(access_token=access_token, refresh_token="", expires_on=datetime.now())


@click.command("auth-url")
@click.argument("state")
@click.pass_obj
def auth_url(config: OAuthConfig, state: str) -> None:
    """Print the URL that starts the OAuth flow."""
    console.print(oauth.build_auth_url(state, config.client_id, config.redirect_uri), soft_wrap=True)


@click.command()
@click.argument("code")
@click.pass_obj
def authorize(config: OAuthConfig, code: str) -> None:
    """Exchange an authorization CODE for tokens."""
    try:
        token = asyncio.run(_authorize_async(config, code))
    except ProviderError as exc:
        _fail(exc)
    _print_token(token)


async def _authorize_async(config: OAuthConfig, code: str) -> OAuthToken:
    async with httpx.AsyncClient() as http:
        return await oauth.exchange_code(
            http,
            code,
            config.client_id,
            config.client_secret,
            config.redirect_uri,
            now=datetime.now(),
        )


@click.command("refresh")
@click.argument("token")
def refresh_token(token: str) -> None:
    """Trade a refresh TOKEN for a new access token."""
    try:
        new_token = asyncio.run(_refresh_async(token))
    except ProviderError as exc:
        _fail(exc)
    _print_token(new_token)


async def _refresh_async(token: str) -> OAuthToken:
    async with httpx.AsyncClient() as http:
        return await oauth.refresh(http, token, now=datetime.now())


@click.command()
def metadata() -> None:
    """Show the integration's catalog entry."""
    console.print(
        Panel(
            f"{METADATA.description}\n\n[dim]{METADATA.icon}[/dim]",
            title=f"[bold]{METADATA.title}[/bold]",
            border_style="blue",
        )
    )


@click.command()
@click.option("--token", envvar="CM_ACCESS_TOKEN", required=True, help="OAuth access token.")
def account(token: str) -> None:
    """Show the account the access token belongs to."""
    try:
        info = asyncio.run(_account_async(token))
    except ProviderError as exc:
        _fail(exc)
    console.print(f"[bold]{info.login_name}[/bold]  [dim]{info.account_url}[/dim]")


async def _account_async(token: str) -> Account:
    async with campaign_monitor_client(_bearer(token)) as cm:
        return await cm.get_account()


@click.command()
@click.argument("email")
@click.option("--token", envvar="CM_ACCESS_TOKEN", required=True, help="OAuth access token.")
@click.option(
    "--preamble/--no-preamble",
    default=None,
    help="Include the 'Added ... ago' prefix (default: CARD_RECENCY_PREAMBLE).",
)
def lookup(email: str, token: str, preamble: bool | None) -> None:
    """Show the membership card for EMAIL."""
    config = SummaryConfig.from_env()
    if preamble is not None:
        config = SummaryConfig(include_recency_preamble=preamble)
    try:
        card = asyncio.run(_lookup_async(email, token, config))
    except ProviderError as exc:
        _fail(exc)
    console.print(Panel(card.text, title=f"[bold]{email}[/bold]", border_style="green"))


async def _lookup_async(email: str, token: str, config: SummaryConfig) -> Summary:
    async with campaign_monitor_client(_bearer(token)) as cm:
        return await cm.fetch_card(email, now=datetime.now(), config=config)
