"""Types for the membership summary pipeline."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

#: Brand icon shown next to every card.
CARD_ICON = "https://storage.googleapis.com/senders-images/cards/campaignmonitor.png"


class SubscriberState(str, Enum):
    """Lifecycle stage of a contact on a list, in display priority order.

    Values are the raw strings returned by the Campaign Monitor API so a
    membership's state can be compared against the enum directly.
    """

    ACTIVE = "Active"
    UNSUBSCRIBED = "Unsubscribed"
    UNCONFIRMED = "Unconfirmed"
    BOUNCED = "Bounced"
    DELETED = "Deleted"


# ── Card labels ────────────────────────────────────────────────────────────────

STATE_LABEL: dict[SubscriberState, str] = {
    SubscriberState.ACTIVE: "Subscribed to",
    SubscriberState.UNSUBSCRIBED: "Unsubscribed from",
    SubscriberState.UNCONFIRMED: "Pending for",
    SubscriberState.BOUNCED: "Bounced from",
    SubscriberState.DELETED: "Deleted from",
}


def parse_date_added(raw: object) -> datetime | None:
    """Parse a ``DateSubscriberAdded`` value into a naive UTC datetime.

    Accepts the API's ``YYYY-MM-DD HH:MM:SS`` form as well as ISO 8601 with an
    offset. Returns None for anything unparseable.
    """
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable DateSubscriberAdded %r", raw)
        return None
    return to_naive_utc(parsed)


def to_naive_utc(value: datetime) -> datetime:
    """Drop timezone info, converting aware datetimes to UTC first."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ── Membership / summary ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class MembershipRecord:
    """One (list, subscriber) pairing as returned by ``listsforemail.json``.

    ``subscriber_state`` keeps the raw provider string: states outside
    SubscriberState are carried through and ignored when grouping.
    """

    list_id: str
    list_name: str
    subscriber_state: str
    date_added: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MembershipRecord":
        """Map a raw API membership dict to a MembershipRecord."""
        return cls(
            list_id=str(data.get("ListID", "")),
            list_name=str(data.get("ListName", "")),
            subscriber_state=str(data.get("SubscriberState", "")),
            date_added=parse_date_added(data.get("DateSubscriberAdded")),
        )


@dataclass(frozen=True)
class Summary:
    """The card payload rendered by the host platform."""

    text: str
    icon: str = CARD_ICON
