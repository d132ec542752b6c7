"""Data types shared across Campaign Monitor provider modules."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class OAuthToken:
    """Tokens returned by the OAuth code exchange or a refresh."""

    access_token: str
    refresh_token: str
    expires_on: datetime


@dataclass(frozen=True)
class Client:
    """A Campaign Monitor client (the tenant that owns the lists)."""

    client_id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Client":
        return cls(client_id=str(data.get("ClientID", "")), name=str(data.get("Name", "")))


@dataclass(frozen=True)
class MailingList:
    """A subscriber list belonging to a client."""

    list_id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MailingList":
        return cls(list_id=str(data.get("ListID", "")), name=str(data.get("Name", "")))


@dataclass(frozen=True)
class Account:
    """What the host platform shows for a connected account."""

    login_name: str
    account_url: str = "https://login.createsend.com"


@dataclass(frozen=True)
class IntegrationMetadata:
    """Static descriptor used by the integration catalog UI."""

    icon: str
    title: str
    description: str


METADATA = IntegrationMetadata(
    icon="https://storage.googleapis.com/senders-images/cards/campaignmonitor.png",
    title="Campaign Monitor",
    description="See if the sender is subscribed to any of your Campaign Monitor lists.",
)
