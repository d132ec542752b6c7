"""Campaign Monitor OAuth: authorization URL, code exchange and token refresh."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx

from campaign_card.provider.errors import ProviderError, normalize_error
from campaign_card.provider.types import OAuthToken

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://api.createsend.com/oauth"
TOKEN_URL = "https://api.createsend.com/oauth/token"

# Scope covering list and subscriber reads (listsforemail.json)
OAUTH_SCOPE = "ManageLists"

_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class OAuthConfig:
    """OAuth application credentials registered with Campaign Monitor."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    @classmethod
    def from_env(cls) -> OAuthConfig:
        """Build OAuthConfig from environment variables."""
        return cls(
            client_id=os.environ.get("CM_CLIENT_ID", ""),
            client_secret=os.environ.get("CM_CLIENT_SECRET", ""),
            redirect_uri=os.environ.get("CM_REDIRECT_URI", ""),
        )


def build_auth_url(state: str, client_id: str, redirect_uri: str) -> str:
    """Return the URL the browser opens to start the OAuth flow."""
    params = {
        "type": "web_server",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": OAUTH_SCOPE,
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(
    http: httpx.AsyncClient,
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    now: datetime,
) -> OAuthToken:
    """Trade an authorization code for an access/refresh token pair.

    ``now`` anchors ``expires_on``; the server only reports ``expires_in``.
    """
    data = await _post_token(
        http,
        {
            "grant_type": "authorization_code",
            "client_id": client_id,
            "client_secret": client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        },
    )
    logger.info("Exchanged authorization code for Campaign Monitor token")
    return _token_from_response(data, now)


async def refresh(http: httpx.AsyncClient, refresh_token: str, now: datetime) -> OAuthToken:
    """Get a fresh access token. Raises ProviderError if none is returned."""
    data = await _post_token(
        http,
        {"grant_type": "refresh_token", "refresh_token": refresh_token},
    )
    if not data.get("access_token"):
        raise ProviderError(
            "Campaign Monitor: No access token returned for the given refresh token"
        )
    logger.info("Refreshed Campaign Monitor access token")
    return _token_from_response(data, now)


async def _post_token(http: httpx.AsyncClient, params: dict[str, str]) -> dict[str, Any]:
    """POST to the token endpoint with query parameters and return the JSON body."""
    logger.debug("OAuth → %s grant_type=%s", TOKEN_URL, params.get("grant_type"))
    try:
        response = await http.post(TOKEN_URL, params=params, timeout=_TIMEOUT_SECONDS)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise normalize_error(exc) from exc
    if not isinstance(data, dict):
        raise ProviderError(f"Unexpected token response: {data!r}")
    return data


def _token_from_response(data: dict[str, Any], now: datetime) -> OAuthToken:
    return OAuthToken(
        access_token=str(data.get("access_token", "")),
        refresh_token=str(data.get("refresh_token", "")),
        expires_on=now + timedelta(seconds=int(data.get("expires_in") or 0)),
    )
