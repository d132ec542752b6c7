"""Campaign Monitor API client — clients, lists and memberships for an email."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import httpx

from campaign_card.processing.summarizer import SummaryConfig, summarize
from campaign_card.processing.types import MembershipRecord, Summary
from campaign_card.provider.errors import ProviderError, normalize_error
from campaign_card.provider.types import Account, Client, MailingList, OAuthToken

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.createsend.com/api/v3.1"

_TIMEOUT_SECONDS = 10.0


class CampaignMonitorClient:
    """Thin async wrapper around the Campaign Monitor v3.1 REST API.

    Holds one ``httpx.AsyncClient`` whose base URL and bearer header are fixed
    when it is built, so concurrent lookups for different tokens never share
    auth state. Use the ``campaign_monitor_client()`` context manager to
    construct and tear down correctly.

    Only the first client of the account is ever queried.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    # ── Public API ─────────────────────────────────────────────────────────────

    async def get_clients(self) -> list[Client]:
        """Return every client visible to the token."""
        raw = await self._get("/clients.json")
        return [Client.from_api(c) for c in _as_list(raw)]

    async def get_lists(self, client: Client) -> list[MailingList]:
        """Return the subscriber lists of a client."""
        raw = await self._get(f"/clients/{client.client_id}/lists.json")
        return [MailingList.from_api(lst) for lst in _as_list(raw)]

    async def get_memberships(self, client: Client, email: str) -> list[MembershipRecord]:
        """Return every list of ``client`` the email address is (or was) on."""
        raw = await self._get(
            f"/clients/{client.client_id}/listsforemail.json",
            params={"email": email},
        )
        return [MembershipRecord.from_api(m) for m in _as_list(raw)]

    async def get_account(self) -> Account:
        """Describe the connected account by its first client's name."""
        client = await self._first_client()
        if client is None:
            raise ProviderError("Campaign Monitor: no client found for this account")
        return Account(login_name=client.name)

    async def fetch_memberships(self, email: str) -> list[MembershipRecord]:
        """Collect the memberships of ``email`` across the first client's lists.

        Lists and memberships are fetched concurrently. The lists aren't used
        yet; memberships already carry the list name.
        """
        client = await self._first_client()
        if client is None:
            return []
        _lists, memberships = await asyncio.gather(
            self.get_lists(client),
            self.get_memberships(client, email),
        )
        logger.debug(
            "Found %d memberships for %s in client %s",
            len(memberships),
            email,
            client.client_id,
        )
        return memberships

    async def fetch_card(
        self,
        email: str,
        now: datetime,
        config: SummaryConfig | None = None,
    ) -> Summary:
        """Fetch memberships for ``email`` and summarise them into a card."""
        memberships = await self.fetch_memberships(email)
        return summarize(memberships, now, config)

    # ── Internal helpers ───────────────────────────────────────────────────────

    async def _first_client(self) -> Client | None:
        clients = await self.get_clients()
        if not clients:
            return None
        if len(clients) > 1:
            logger.warning(
                "Account has %d clients; only %r is used", len(clients), clients[0].name
            )
        return clients[0]

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET an API path and return the decoded JSON body.

        Raises ProviderError for transport failures and non-2xx responses.
        """
        logger.debug("CM → GET %s %s", path, params or "")
        try:
            response = await self._http.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise normalize_error(exc) from exc


def _as_list(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        logger.warning("Expected a JSON list, got %s", type(raw).__name__)
        return []
    return [item for item in raw if isinstance(item, dict)]


def build_http_client(
    token: OAuthToken,
    *,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Return an AsyncClient bound to ``token``'s access token."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers={
            "Authorization": f"Bearer {token.access_token}",
            "Accept": "application/json",
        },
        timeout=_TIMEOUT_SECONDS,
        transport=transport,
    )


@asynccontextmanager
async def campaign_monitor_client(
    token: OAuthToken,
    *,
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[CampaignMonitorClient]:
    """Async context manager that yields a CampaignMonitorClient for ``token``.

    ``transport`` is passed straight to httpx (tests use ``httpx.MockTransport``).

    Example::

        async with campaign_monitor_client(token) as cm:
            card = await cm.fetch_card("alice@example.com", now=datetime.now())
    """
    async with build_http_client(token, base_url=base_url, transport=transport) as http:
        yield CampaignMonitorClient(http)
